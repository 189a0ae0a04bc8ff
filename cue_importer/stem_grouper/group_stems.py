"""Nest stems under their parent cues."""

import logging
import time

from cue_importer.categorizer.schemas import CueType
from cue_importer.common.stage_summary import StageSummary
from cue_importer.durations import with_duration
from cue_importer.durations.schemas import TimedClip
from cue_importer.stem_grouper.schemas import GroupedCue
from cue_importer.timecode import DEFAULT_FPS

logger = logging.getLogger(__name__)


def group_key(base_track_name: str) -> str:
    """Normalise a base track name for grouping."""
    return " ".join(base_track_name.lower().split())


def _unique_by_id(stems: list[TimedClip]) -> list[TimedClip]:
    seen: set[str] = set()
    unique: list[TimedClip] = []
    for stem in stems:
        if stem.id not in seen:
            seen.add(stem.id)
            unique.append(stem)
    return unique


def _absorb(parent: GroupedCue, stems: list[TimedClip], fps: float) -> GroupedCue:
    """Attach stems and take the longest duration, since stems play simultaneously."""
    merged = _unique_by_id([*parent.stems, *stems])
    ticks = max([parent.duration_ticks, *(stem.duration_ticks for stem in merged)])
    return with_duration(parent, ticks, fps).model_copy(
        update={"stems": merged, "stem_duration_absorbed": True}
    )


def _synthesize(stems: list[TimedClip], fps: float) -> GroupedCue:
    first = stems[0]
    parent = GroupedCue(
        **first.model_dump(exclude={"id", "cue_type", "is_stem", "stem_part"}),
        id=f"{first.id}-group",
        cue_type=CueType.MAIN,
        is_synthetic=True,
    )
    return _absorb(parent, stems, fps)


def group_stems(
    clips: list[TimedClip],
    fps: float = DEFAULT_FPS,
) -> tuple[list[GroupedCue], StageSummary]:
    """Group stems under the main or SFX cue sharing their base track name.

    Stems without a parent get a synthetic main cue built from the first stem
    of their group. Parent durations are recomputed through the tick converter.
    Running this on its own output returns the same cues.

    Args:
        clips: Timed clips, stems and non-stems mixed.
        fps: Frame rate for recomputed durations.

    Returns:
        Top-level cues in input order (synthetic parents last) and a summary.
    """
    started = time.perf_counter()

    parents: list[GroupedCue] = []
    stem_groups: dict[str, list[TimedClip]] = {}
    for clip in clips:
        if clip.cue_type == CueType.STEM:
            stem_groups.setdefault(group_key(clip.base_track_name), []).append(clip)
        elif isinstance(clip, GroupedCue):
            parents.append(clip)
        else:
            parents.append(GroupedCue(**clip.model_dump()))

    main_count = len(parents)
    total_stems = sum(len(group) for group in stem_groups.values())
    linked_stems = 0
    created_parents = 0

    for key, stems in stem_groups.items():
        parent_index = next(
            (i for i, parent in enumerate(parents) if group_key(parent.base_track_name) == key),
            None,
        )
        if parent_index is not None:
            parents[parent_index] = _absorb(parents[parent_index], stems, fps)
        else:
            parents.append(_synthesize(stems, fps))
            created_parents += 1
        linked_stems += len(stems)

    logger.info(
        "[stems] %d stems linked, %d synthetic parents created, %d cues total",
        linked_stems,
        created_parents,
        len(parents),
    )

    summary = StageSummary(
        step_name="Grouping Stems",
        input_count=len(clips),
        output_count=len(parents),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "main_cues": main_count,
            "total_stems": total_stems,
            "linked_stems": linked_stems,
            "created_parents": created_parents,
        },
        samples=[
            f"{cue.display_name}: {len(cue.stems)} stems" for cue in parents if cue.stems
        ][:2],
    )
    return parents, summary
