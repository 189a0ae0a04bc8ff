"""Timeline tick to cue-sheet duration conversion."""

from cue_importer.timecode.converter import (
    DEFAULT_FPS,
    ROUND_UP_FRAME,
    TICKS_PER_SECOND,
    CueDuration,
    ticks_to_duration,
)

__all__ = [
    "DEFAULT_FPS",
    "ROUND_UP_FRAME",
    "TICKS_PER_SECOND",
    "CueDuration",
    "ticks_to_duration",
]
