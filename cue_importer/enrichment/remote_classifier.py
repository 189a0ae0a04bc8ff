"""Second opinion from a remote classifier for low-confidence cues."""

import asyncio
import logging
import re
import time
from enum import StrEnum

from pydantic import Field, TypeAdapter, ValidationError

from cue_importer.categorizer.schemas import CueType
from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.common.stage_summary import StageSummary
from cue_importer.enrichment.protocols import RemoteClassifier
from cue_importer.enrichment.schemas import EnrichedCue, EnrichedField, ProvenanceSource

logger = logging.getLogger(__name__)

STEP_NAME = "Remote Classification"

# Used when the reply omits a confidence
DEFAULT_REMOTE_CONFIDENCE = 0.85

CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class RemoteClassification(StrEnum):
    MUSIC = "music"
    SFX = "sfx"
    STEM = "stem"
    NON_MUSIC = "non_music"


class RemoteClassificationResult(BaseCueModel):
    """One entry of the classifier's reply. ``index`` is 1-based."""

    index: int
    classification: RemoteClassification
    display_name: str | None = Field(default=None, alias="displayName")
    library: str | None = None
    confidence: float | None = Field(default=None, ge=0, le=1)
    reasoning: str | None = None


_RESULTS_ADAPTER = TypeAdapter(list[RemoteClassificationResult])


def strip_code_fences(response: str) -> str:
    """Remove a surrounding ```json fence, if the reply has one."""
    return CODE_FENCE_PATTERN.sub("", response.strip()).strip()


def parse_classifier_response(response: str) -> list[RemoteClassificationResult]:
    """Decode the classifier reply.

    Raises:
        ValidationError: The reply is not a JSON array of classifications.
    """
    return _RESULTS_ADAPTER.validate_json(strip_code_fences(response))


def apply_classification(
    cue: EnrichedCue, result: RemoteClassificationResult
) -> EnrichedCue:
    """Map a classification onto a cue.

    ``stem`` keeps the grouped cue type, since stems only reach this stage
    as synthetic or parent cues.
    """
    confidence = result.confidence if result.confidence is not None else DEFAULT_REMOTE_CONFIDENCE
    cue_type = cue.cue_type
    if result.classification == RemoteClassification.NON_MUSIC:
        cue_type = CueType.EXCLUDED
    elif result.classification == RemoteClassification.SFX:
        cue_type = CueType.SFX
    elif result.classification == RemoteClassification.MUSIC:
        cue_type = CueType.MAIN

    update: dict[str, object] = {
        "cue_type": cue_type,
        "confidence": confidence,
        "remote_classified": True,
        "remote_reasoning": result.reasoning,
    }
    if cue.is_low_confidence and result.display_name and result.display_name.strip():
        update["display_name"] = result.display_name.strip()

    classified = cue.model_copy(update=update)
    return classified.with_field(
        EnrichedField.LIBRARY,
        result.library,
        ProvenanceSource.REMOTE_CLASSIFIER,
        confidence,
        reason=result.reasoning,
    )


async def classify_low_confidence(
    cues: list[EnrichedCue],
    classifier: RemoteClassifier | None,
    enabled: bool = False,
    timeout: float = 30.0,
) -> tuple[list[EnrichedCue], list[EnrichedCue], StageSummary]:
    """Send low-confidence cues to the remote classifier in one batch.

    Any failure, including an undecodable reply, leaves every cue as it was
    and marks the stage skipped.

    Returns:
        The remaining cues, cues newly classified as non-music, and a summary.
    """
    started = time.perf_counter()
    low_confidence = [cue for cue in cues if cue.is_low_confidence]

    def skipped(reason: str, failed: int = 0) -> tuple[list[EnrichedCue], list[EnrichedCue], StageSummary]:
        return cues, [], StageSummary(
            step_name=STEP_NAME,
            input_count=len(low_confidence),
            output_count=len(cues),
            elapsed_ms=int((time.perf_counter() - started) * 1000),
            skipped=True,
            reason=reason,
            counts={"failed": failed},
        )

    if not enabled or classifier is None:
        return skipped("Remote classifier not enabled")
    if not low_confidence:
        return skipped("No low-confidence clips")

    logger.info("[remote] Batch classifying %d low-confidence cues", len(low_confidence))
    try:
        response = await asyncio.wait_for(
            classifier.classify_batch([cue.original_name for cue in low_confidence]),
            timeout=timeout,
        )
    except Exception as e:
        logger.warning("[remote] Batch classification failed: %s", e)
        return skipped(f"Remote classifier failed: {e}", failed=1)

    try:
        results = parse_classifier_response(response)
    except ValidationError as e:
        logger.warning("[remote] Could not decode classifier reply: %s", e)
        return skipped("Could not decode remote classifier reply", failed=1)

    by_id: dict[str, RemoteClassificationResult] = {}
    for result in results:
        if 1 <= result.index <= len(low_confidence):
            by_id[low_confidence[result.index - 1].id] = result

    kept: list[EnrichedCue] = []
    excluded: list[EnrichedCue] = []
    for cue in cues:
        result = by_id.get(cue.id)
        if result is None:
            kept.append(cue)
            continue
        classified = apply_classification(cue, result)
        (excluded if classified.excluded else kept).append(classified)

    logger.info(
        "[remote] Classified %d of %d cues, %d excluded as non-music",
        len(by_id),
        len(low_confidence),
        len(excluded),
    )

    return kept, excluded, StageSummary(
        step_name=STEP_NAME,
        input_count=len(low_confidence),
        output_count=len(kept),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "classified": len(by_id),
            "excluded": len(excluded),
            "failed": 0,
        },
        samples=[
            f"{cue.original_name} -> {cue.display_name} ({cue.cue_type})"
            for cue in kept + excluded
            if cue.remote_classified
        ][:3],
    )
