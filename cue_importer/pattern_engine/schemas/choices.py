"""Options presented to a user for an uncertain field."""

from enum import StrEnum, auto

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pattern_engine.schemas.track_context import TrackContext

CUSTOM_VALUE = "__CUSTOM__"


class ChoiceSource(StrEnum):
    """Where a choice option came from."""

    PATTERN = auto()
    DEFAULT = auto()
    USER_CHOICE = auto()


class ChoiceOption(BaseCueModel):
    """A single selectable value."""

    id: str
    value: str | None
    confidence: float = Field(ge=0, le=1)
    reasoning: str
    source: ChoiceSource
    pattern_id: str | None = None


class InteractiveChoices(BaseCueModel):
    """Ranked options for one field of one track."""

    field: str
    track: TrackContext
    options: list[ChoiceOption]
    top_confidence: float
    requires_choice: bool
    # Top option is a pattern strong enough to preselect
    has_suggestion: bool = False


class BatchChoiceGroup(InteractiveChoices):
    """Choices shared by tracks with the same library and track type."""

    tracks: list[TrackContext] = Field(default_factory=list)
    track_count: int = 0
    context_key: str
