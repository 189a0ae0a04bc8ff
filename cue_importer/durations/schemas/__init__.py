"""Duration schemas."""

from cue_importer.durations.schemas.timed_clip import TimedClip

__all__ = ["TimedClip"]
