"""The correction log patterns are learned from."""

from datetime import UTC, datetime
from enum import StrEnum, auto

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pattern_engine.schemas.choices import ChoiceOption
from cue_importer.pattern_engine.schemas.track_context import TrackContext


class UserActionType(StrEnum):
    """Kinds of user interaction with a cue field."""

    CELL_EDIT = auto()
    APPROVE_TRACK = auto()
    REJECT_SUGGESTION = auto()
    SELECT_OPTION = auto()
    OVERRIDE_PATTERN = auto()
    CONFIRM_PATTERN = auto()


class UserAction(BaseCueModel):
    """One recorded user change to a field."""

    action_type: UserActionType
    track_context: TrackContext
    field: str
    old_value: str | None = None
    new_value: str | None = None

    from_suggestion: bool = False
    suggestion_options: list[ChoiceOption] = Field(default_factory=list)
    pattern_id: str | None = None
    confidence_at_action: float | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
