"""API request schemas."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pattern_engine.schemas import ChoiceOption, TrackContext


class CreateImportRequest(BaseCueModel):
    """Request to import a project file."""

    file_path: str = Field(min_length=1)
    fps: float | None = Field(default=None, gt=0)
    remote_classifier_enabled: bool | None = None


class ChoicesRequest(BaseCueModel):
    """Ask for the options to offer for one field of one track."""

    track: TrackContext
    field: str


class BatchChoicesRequest(BaseCueModel):
    """Ask for options for one field across many tracks."""

    tracks: list[TrackContext]
    field: str


class RecordChoiceRequest(BaseCueModel):
    """A value the user picked or typed for a field."""

    track: TrackContext
    field: str
    chosen: ChoiceOption
    all_options: list[ChoiceOption] = Field(default_factory=list)


class PatternOverrideRequest(BaseCueModel):
    """The user replaced a value that a pattern filled."""

    track: TrackContext
    field: str
    pattern_id: str
    old_value: str | None = None
    new_value: str | None = None


class UpdateConfidenceRequest(BaseCueModel):
    confidence: float
