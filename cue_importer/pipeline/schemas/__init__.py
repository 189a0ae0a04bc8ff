"""Import pipeline schemas."""

from cue_importer.pipeline.schemas.import_result import FinalSummary, ImportResult
from cue_importer.pipeline.schemas.progress import (
    TOTAL_STEPS,
    ImportStatus,
    ProgressEvent,
    ProgressMessage,
    StatusMessage,
)

__all__ = [
    "TOTAL_STEPS",
    "FinalSummary",
    "ImportResult",
    "ImportStatus",
    "ProgressEvent",
    "ProgressMessage",
    "StatusMessage",
]
