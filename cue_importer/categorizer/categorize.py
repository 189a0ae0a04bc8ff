"""Assign a cue type and confidence to every raw clip."""

import logging
import time

from cue_importer.categorizer.rules import is_free_sfx, match_non_music, match_sfx
from cue_importer.categorizer.schemas import (
    CategorizationResult,
    CategorizerThresholds,
    ClassifiedClip,
    CueType,
)
from cue_importer.classifier.recognizers import classify_filename, strip_audio_extension
from cue_importer.common.stage_summary import StageSummary
from cue_importer.project_parser.schemas import RawClip

logger = logging.getLogger(__name__)


def _excluded_clip(clip: RawClip, pattern_name: str, thresholds: CategorizerThresholds) -> ClassifiedClip:
    display_name = strip_audio_extension(clip.original_name).replace("_", " ").strip()
    return ClassifiedClip(
        **clip.model_dump(),
        cue_type=CueType.EXCLUDED,
        confidence=thresholds.non_music,
        classification_reason=f"non_music: {pattern_name}",
        matched_pattern=pattern_name,
        base_track_name=display_name.lower(),
        display_name=display_name,
    )


def categorize_clip(
    clip: RawClip,
    thresholds: CategorizerThresholds | None = None,
) -> ClassifiedClip | None:
    """Classify a single clip.

    Returns:
        The classified clip (``cue_type=excluded`` for non-music audio), or
        None for free SFX and names that clean to nothing.
    """
    resolved_thresholds = thresholds or CategorizerThresholds()
    name = clip.original_name

    if is_free_sfx(name):
        return None

    non_music = match_non_music(name)
    if non_music is not None:
        return _excluded_clip(clip, non_music, resolved_thresholds)

    track_info = classify_filename(name)
    if track_info is None:
        return None

    reason = track_info.matched_pattern
    if track_info.is_stem:
        cue_type = CueType.STEM
        confidence = max(track_info.confidence, resolved_thresholds.stem_floor)
    else:
        sfx_pattern = match_sfx(name, track_info.display_name)
        if sfx_pattern is not None:
            cue_type = CueType.SFX
            confidence = resolved_thresholds.sfx_match
            reason = f"sfx_pattern: {sfx_pattern}"
        else:
            cue_type = CueType.MAIN
            confidence = (
                resolved_thresholds.main_with_library
                if track_info.library
                else resolved_thresholds.main_without_library
            )

    return ClassifiedClip(
        **clip.model_dump(),
        **track_info.model_dump(exclude={"confidence", "matched_pattern"}),
        cue_type=cue_type,
        confidence=confidence,
        classification_reason=reason,
        matched_pattern=track_info.matched_pattern,
        is_low_confidence=confidence < resolved_thresholds.low_confidence,
    )


def categorize_clips(
    clips: list[RawClip],
    thresholds: CategorizerThresholds | None = None,
) -> CategorizationResult:
    """Classify raw clips into main, SFX and stem cues.

    Free SFX are dropped and counted. Non-music audio is returned in
    ``excluded`` so it can be reviewed, and never appears in ``clips``.

    Args:
        clips: Clips from the project parser.
        thresholds: Confidence values; defaults apply when omitted.

    Returns:
        The classified clips, the excluded clips and a stage summary.
    """
    started = time.perf_counter()
    resolved_thresholds = thresholds or CategorizerThresholds()

    classified: list[ClassifiedClip] = []
    excluded: list[ClassifiedClip] = []
    free_sfx_count = 0

    for clip in clips:
        if is_free_sfx(clip.original_name):
            free_sfx_count += 1
            continue

        result = categorize_clip(clip, resolved_thresholds)
        if result is None:
            logger.debug("[categorizer] No track information in %r", clip.original_name)
            continue
        if result.cue_type == CueType.EXCLUDED:
            excluded.append(result)
        else:
            classified.append(result)

    counts: dict[str, int | float] = {
        "main": sum(1 for c in classified if c.cue_type == CueType.MAIN),
        "sfx": sum(1 for c in classified if c.cue_type == CueType.SFX),
        "stem": sum(1 for c in classified if c.cue_type == CueType.STEM),
        "skipped_free_sfx": free_sfx_count,
        "skipped_non_music": len(excluded),
        "low_confidence": sum(1 for c in classified if c.is_low_confidence),
        "average_confidence": (
            round(sum(c.confidence for c in classified) / len(classified), 2) if classified else 0.0
        ),
    }

    logger.info(
        "[categorizer] %d main, %d sfx, %d stems, %d excluded, %d free SFX skipped",
        counts["main"],
        counts["sfx"],
        counts["stem"],
        len(excluded),
        free_sfx_count,
    )

    return CategorizationResult(
        clips=classified,
        excluded=excluded,
        free_sfx_count=free_sfx_count,
        summary=StageSummary(
            step_name="Categorizing",
            input_count=len(clips),
            output_count=len(classified),
            elapsed_ms=int((time.perf_counter() - started) * 1000),
            counts=counts,
            samples=[f"{c.display_name} ({c.cue_type}, {c.confidence:.2f})" for c in classified[:3]],
        ),
    )
