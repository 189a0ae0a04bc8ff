from enum import StrEnum, auto


class CueType(StrEnum):
    """Cue sheet line item type."""

    MAIN = auto()
    SFX = auto()
    STEM = auto()
    EXCLUDED = auto()
