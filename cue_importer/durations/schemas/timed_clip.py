"""A classified clip with its cue-sheet duration."""

from cue_importer.categorizer.schemas import ClassifiedClip


class TimedClip(ClassifiedClip):
    """A clip with duration fields derived from its ticks."""

    duration_ticks: int = 0
    duration_seconds: float = 0.0
    duration_frames: int = 0
    formatted_duration: str = "0:00:00"
    was_rounded: bool = False
