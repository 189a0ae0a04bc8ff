"""A main or SFX cue with the stems that belong to it."""

from pydantic import Field

from cue_importer.durations.schemas import TimedClip


class GroupedCue(TimedClip):
    """A top-level cue. Stems only ever appear nested here."""

    stems: list[TimedClip] = Field(default_factory=list)

    # Once set, the duration is the longest of the cue and its stems
    stem_duration_absorbed: bool = False
    # Created from stems that had no main cue
    is_synthetic: bool = False
