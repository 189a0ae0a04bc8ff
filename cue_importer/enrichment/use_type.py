"""Background/visual, instrumental/vocal use types for cue sheet lines.

* BI - background instrumental, the default for library music and SFX
* BV - background vocal
* VI - visual instrumental, music featured on screen
"""

import logging
import re
import time
from collections import Counter
from enum import StrEnum

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.common.stage_summary import StageSummary
from cue_importer.enrichment.schemas import EnrichedCue, EnrichedField, ProvenanceSource

logger = logging.getLogger(__name__)

STEP_NAME = "Detecting Use Types"

SHORT_CUE_SECONDS = 15.0
HIGH_CONFIDENCE = 0.8


class UseType(StrEnum):
    BI = "BI"
    BV = "BV"
    VI = "VI"


class UseTypeDetection(BaseCueModel):
    use_type: UseType
    confidence: float
    reason: str


BI_PATTERNS = [
    re.compile(r"\b(production music|library music|stock music)\b", re.IGNORECASE),
    re.compile(
        r"\b(fx|sfx|sound effect|whoosh|hit|impact|stinger|riser|drop|transition|swell)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(instrumental|inst\.|no vo[cx]|no vocal|without vocal)\b", re.IGNORECASE),
    re.compile(r"\bstem\b", re.IGNORECASE),
    re.compile(r"\b(underscore|score|bed|background)\b", re.IGNORECASE),
    re.compile(r"\b(trailer|epic|cinematic|dramatic)\b", re.IGNORECASE),
    re.compile(r"\b(sting|bumper|logo|tag)\b", re.IGNORECASE),
]

BV_PATTERNS = [
    re.compile(r"\b(vocal|vocals|singing|singer|lyrics|lyric)\b", re.IGNORECASE),
    re.compile(r"\b(song|single|feat\.|featuring|ft\.)\b", re.IGNORECASE),
    re.compile(r"\b(full mix|radio edit|album version)\b", re.IGNORECASE),
    re.compile(r"\b(pop|rock|hip hop|rap|r&b|soul|country|folk)\b", re.IGNORECASE),
]

VI_PATTERNS = [
    re.compile(r"\b(visual|on[-\s]?screen|performance|live|concert|band)\b", re.IGNORECASE),
    re.compile(r"\b(source music|diegetic)\b", re.IGNORECASE),
]

# Libraries whose catalogs are almost always background instrumental
BI_LIBRARIES = (
    "BMG Production Music",
    "APM Music",
    "Extreme Music",
    "Universal Production Music",
    "Artlist",
    "Epidemic Sound",
    "AudioJungle",
    "PremiumBeat",
)


def _matches_any(patterns: list[re.Pattern[str]], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def detect_use_type(
    track_name: str,
    library: str | None = None,
    duration_seconds: float | None = None,
) -> UseTypeDetection:
    """Pick a use type from the library, the duration and keywords in the name.

    Rules are checked in order; the first that applies decides.
    """
    name = (track_name or "").lower()
    library_name = (library or "").lower()

    if any(known.lower() in library_name for known in BI_LIBRARIES):
        if _matches_any(BV_PATTERNS, name):
            return UseTypeDetection(
                use_type=UseType.BV, confidence=0.7, reason="Library track with vocal indicators"
            )
        return UseTypeDetection(use_type=UseType.BI, confidence=0.9, reason="Production music library")

    if duration_seconds and 0 < duration_seconds < SHORT_CUE_SECONDS:
        return UseTypeDetection(use_type=UseType.BI, confidence=0.9, reason="Short duration (likely SFX)")

    if _matches_any(VI_PATTERNS, name):
        return UseTypeDetection(use_type=UseType.VI, confidence=0.7, reason="Visual/on-screen indicators")

    if _matches_any(BI_PATTERNS, name):
        return UseTypeDetection(use_type=UseType.BI, confidence=0.85, reason="Instrumental indicators")

    if _matches_any(BV_PATTERNS, name):
        return UseTypeDetection(use_type=UseType.BV, confidence=0.8, reason="Vocal indicators")

    if "production" in library_name:
        return UseTypeDetection(use_type=UseType.BI, confidence=0.7, reason="Default for production music")

    return UseTypeDetection(use_type=UseType.BI, confidence=0.5, reason="Default (uncertain)")


def detect_use_types(cues: list[EnrichedCue]) -> tuple[list[EnrichedCue], StageSummary]:
    """Write a use type into every cue whose ``use`` field is still empty."""
    started = time.perf_counter()
    detected: list[EnrichedCue] = []
    use_types: Counter[str] = Counter()
    high_confidence = 0

    for cue in cues:
        detection = detect_use_type(
            cue.display_name,
            library=cue.field_value(EnrichedField.LIBRARY),
            duration_seconds=cue.duration_seconds,
        )
        updated = cue.with_field(
            EnrichedField.USE,
            detection.use_type.value,
            ProvenanceSource.DEFAULT,
            detection.confidence,
            reason=detection.reason,
        )
        detected.append(updated)

        use = updated.fields.get(EnrichedField.USE)
        if use is not None:
            use_types[use.value] += 1
            if use.confidence >= HIGH_CONFIDENCE:
                high_confidence += 1

    logger.info(
        "[use-type] BI=%d BV=%d VI=%d",
        use_types[UseType.BI.value],
        use_types[UseType.BV.value],
        use_types[UseType.VI.value],
    )

    return detected, StageSummary(
        step_name=STEP_NAME,
        input_count=len(cues),
        output_count=len(detected),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "BI": use_types[UseType.BI.value],
            "BV": use_types[UseType.BV.value],
            "VI": use_types[UseType.VI.value],
            "high_confidence": high_confidence,
        },
    )
