"""API schemas for requests and responses."""

from cue_importer.api.schemas.requests import (
    BatchChoicesRequest,
    ChoicesRequest,
    CreateImportRequest,
    PatternOverrideRequest,
    RecordChoiceRequest,
    UpdateConfidenceRequest,
)
from cue_importer.api.schemas.responses import ImportResponse, LearnedPatternResponse

__all__ = [
    "BatchChoicesRequest",
    "ChoicesRequest",
    "CreateImportRequest",
    "ImportResponse",
    "LearnedPatternResponse",
    "PatternOverrideRequest",
    "RecordChoiceRequest",
    "UpdateConfidenceRequest",
]
