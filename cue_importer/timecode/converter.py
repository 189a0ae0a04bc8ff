"""Convert timeline ticks into cue-sheet durations."""

import math

from cue_importer.common.base_cue_model import BaseCueModel

# Premiere timebase
TICKS_PER_SECOND = 254016000000

DEFAULT_FPS = 23.976

# Delivery rule: a remainder of this many frames or more counts as a full second
ROUND_UP_FRAME = 12


class CueDuration(BaseCueModel):
    """A duration formatted for a cue sheet."""

    formatted: str
    seconds: float
    frames: int
    was_rounded: bool


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def ticks_to_duration(
    ticks: int,
    fps: float = DEFAULT_FPS,
    ticks_per_second: int = TICKS_PER_SECOND,
) -> CueDuration:
    """Convert a tick count to an ``M:SS:FF`` duration.

    The frame remainder is computed against ``fps``, but the round-up cut
    point is the fixed ``ROUND_UP_FRAME`` regardless of frame rate. When it
    triggers, the seconds carry (and minutes with them) and frames reset to 0.

    Args:
        ticks: Timeline ticks. Negative values are treated as 0.
        fps: Frames per second used for the frame remainder.
        ticks_per_second: Timebase of the source timeline.

    Returns:
        The formatted duration, the (possibly rounded) seconds, the total
        frame count of the raw duration, and whether rounding occurred.
    """
    raw_seconds = max(ticks, 0) / ticks_per_second
    whole_seconds = math.floor(raw_seconds)
    frames = _round_half_up((raw_seconds - whole_seconds) * fps)
    total_frames = _round_half_up(raw_seconds * fps)

    seconds = raw_seconds
    was_rounded = False
    if frames >= ROUND_UP_FRAME:
        whole_seconds += 1
        frames = 0
        seconds = float(whole_seconds)
        was_rounded = True

    minutes, secs = divmod(whole_seconds, 60)

    return CueDuration(
        formatted=f"{minutes}:{secs:02d}:{frames:02d}",
        seconds=seconds,
        frames=total_frames,
        was_rounded=was_rounded,
    )
