"""Auto-fill empty fields from high-confidence learned patterns."""

import asyncio
import logging
import time
from collections import Counter

from cue_importer.common.stage_summary import StageSummary
from cue_importer.enrichment.concurrency import DEFAULT_CONCURRENCY, map_bounded
from cue_importer.enrichment.schemas import EnrichedCue, EnrichedField, ProvenanceSource
from cue_importer.pattern_engine import PatternEngine

logger = logging.getLogger(__name__)

STEP_NAME = "Applying Patterns"


async def apply_patterns(
    cues: list[EnrichedCue],
    engine: PatternEngine | None,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: float = 10.0,
) -> tuple[list[EnrichedCue], StageSummary]:
    """Write each auto-fill pattern's value into the field it targets."""
    started = time.perf_counter()
    if engine is None:
        return cues, StageSummary(
            step_name=STEP_NAME,
            input_count=len(cues),
            output_count=len(cues),
            skipped=True,
            reason="no pattern store configured",
        )

    async def fill_one(cue: EnrichedCue) -> tuple[EnrichedCue, int | None]:
        try:
            applied = await asyncio.wait_for(
                engine.apply_high_confidence_patterns(cue.track_context()), timeout=timeout
            )
        except Exception as e:
            logger.warning("[patterns] Auto-fill failed for %r: %s", cue.display_name, e)
            return cue, None

        for field, match in applied.items():
            cue = cue.with_field(
                EnrichedField(field),
                match.value,
                ProvenanceSource.PATTERN,
                match.confidence,
                pattern_id=match.pattern_id,
                reason=match.reasoning,
            )
        return cue, len(applied)

    results = await map_bounded(cues, fill_one, concurrency)
    filled = [cue for cue, _ in results]
    per_field = Counter(
        str(field)
        for cue in filled
        for field, value in cue.fields.items()
        if value.source == ProvenanceSource.PATTERN
    )
    failed = sum(1 for _, count in results if count is None)
    applied_total = sum(count for _, count in results if count)

    logger.info("[patterns] Applied %d pattern values, %d failed", applied_total, failed)

    return filled, StageSummary(
        step_name=STEP_NAME,
        input_count=len(cues),
        output_count=len(filled),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "applied": applied_total,
            "tracks_filled": sum(1 for _, count in results if count),
            "failed": failed,
            **{f"filled_{field}": count for field, count in sorted(per_field.items())},
        },
    )
