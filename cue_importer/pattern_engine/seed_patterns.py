"""Patterns every fresh store starts with."""

import logging

from cue_importer.pattern_engine.schemas import Pattern, PatternAction, PatternType
from cue_importer.pattern_engine.store import PatternStore

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS: list[Pattern] = [
    Pattern(
        pattern_type=PatternType.LIBRARY_DEFAULT,
        condition={"library_contains": "BMG"},
        action=PatternAction(field="artist", value="N/A"),
        confidence=0.7,
        reasoning=(
            "Production music from BMG typically does not have a traditional artist. "
            "The composer is credited instead."
        ),
    ),
    Pattern(
        pattern_type=PatternType.LIBRARY_DEFAULT,
        condition={"library_contains": "APM"},
        action=PatternAction(field="artist", value="N/A"),
        confidence=0.7,
        reasoning=(
            "APM is a production music library where tracks are composed for licensing, "
            "not by traditional recording artists."
        ),
    ),
    Pattern(
        pattern_type=PatternType.CATALOG_PATTERN,
        condition={"catalog_code_prefix": "IATS"},
        action=PatternAction(field="library", value="BMG Production Music"),
        confidence=0.85,
        reasoning="IATS catalog codes are associated with BMG Production Music library.",
    ),
]


async def seed_default_patterns(store: PatternStore) -> int:
    """Insert the default patterns that are missing from ``store``.

    Returns:
        Number of patterns inserted.
    """
    inserted = 0
    for pattern in DEFAULT_PATTERNS:
        if await store.find_pattern(pattern) is None:
            await store.upsert_pattern(pattern)
            inserted += 1
    if inserted:
        logger.info("[patterns] Seeded %d default patterns", inserted)
    return inserted
