"""Attach formatted durations to classified clips."""

import logging
import time
from typing import TypeVar

from cue_importer.categorizer.schemas import ClassifiedClip
from cue_importer.common.stage_summary import StageSummary
from cue_importer.durations.schemas import TimedClip
from cue_importer.timecode import DEFAULT_FPS, ticks_to_duration

logger = logging.getLogger(__name__)

TimedClipT = TypeVar("TimedClipT", bound=TimedClip)


def duration_fields(ticks: int, fps: float = DEFAULT_FPS) -> dict[str, int | float | str | bool]:
    """Duration fields of a ``TimedClip`` for the given tick count."""
    duration = ticks_to_duration(ticks, fps=fps)
    return {
        "duration_ticks": max(ticks, 0),
        "duration_seconds": duration.seconds,
        "duration_frames": duration.frames,
        "formatted_duration": duration.formatted,
        "was_rounded": duration.was_rounded,
    }


def with_duration(clip: TimedClipT, ticks: int, fps: float = DEFAULT_FPS) -> TimedClipT:
    """Return a copy of ``clip`` with its duration recomputed from ``ticks``."""
    return clip.model_copy(update=duration_fields(ticks, fps))


def calculate_durations(
    clips: list[ClassifiedClip],
    fps: float = DEFAULT_FPS,
) -> tuple[list[TimedClip], StageSummary]:
    """Convert each clip's total ticks into an ``M:SS:FF`` duration.

    The summed ``total_ticks`` is what is displayed; ``max_ticks`` is carried
    along unchanged.
    """
    started = time.perf_counter()
    timed = [
        TimedClip(**clip.model_dump(), **duration_fields(clip.total_ticks, fps))
        for clip in clips
    ]

    with_duration_count = sum(1 for clip in timed if clip.duration_seconds > 0)
    rounded_count = sum(1 for clip in timed if clip.was_rounded)
    logger.info(
        "[durations] %d clips, %d with duration, %d rounded up at %.3f fps",
        len(timed),
        with_duration_count,
        rounded_count,
        fps,
    )

    summary = StageSummary(
        step_name="Calculating Durations",
        input_count=len(clips),
        output_count=len(timed),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "with_duration": with_duration_count,
            "rounded_up": rounded_count,
            "fps": fps,
        },
        samples=[f"{clip.display_name}: {clip.formatted_duration}" for clip in timed[:3]],
    )
    return timed, summary
