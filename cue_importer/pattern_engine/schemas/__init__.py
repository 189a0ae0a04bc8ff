"""Pattern engine schemas."""

from cue_importer.pattern_engine.schemas.choices import (
    CUSTOM_VALUE,
    BatchChoiceGroup,
    ChoiceOption,
    ChoiceSource,
    InteractiveChoices,
)
from cue_importer.pattern_engine.schemas.pattern import Pattern, PatternAction, PatternType
from cue_importer.pattern_engine.schemas.pattern_match import PatternMatch
from cue_importer.pattern_engine.schemas.pattern_thresholds import PatternThresholds
from cue_importer.pattern_engine.schemas.track_context import TrackContext
from cue_importer.pattern_engine.schemas.user_action import UserAction, UserActionType

__all__ = [
    "CUSTOM_VALUE",
    "BatchChoiceGroup",
    "ChoiceOption",
    "ChoiceSource",
    "InteractiveChoices",
    "Pattern",
    "PatternAction",
    "PatternMatch",
    "PatternThresholds",
    "PatternType",
    "TrackContext",
    "UserAction",
    "UserActionType",
]
