"""Progress messages sent while an import runs."""

from enum import StrEnum, auto
from typing import Annotated, Literal

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pipeline.schemas.import_result import FinalSummary

TOTAL_STEPS = 8


class ImportStatus(StrEnum):
    """Lifecycle of an import."""

    QUEUED = auto()
    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()
    CANCELLED = auto()


class ProgressEvent(BaseCueModel):
    """Emitted when a pipeline step starts and when it completes."""

    kind: Literal["progress"] = "progress"
    import_id: str
    step_index: int = Field(ge=1, le=TOTAL_STEPS)
    total_steps: int = TOTAL_STEPS
    step_name: str
    description: str
    percent_complete: int = Field(ge=0, le=100)
    items_processed: int = 0
    completed: bool = False


class StatusMessage(BaseCueModel):
    """Final notification for an import.

    ``percent_complete`` is where the import stopped; ``summary`` is only set
    when it completed.
    """

    kind: Literal["status"] = "status"
    import_id: str
    status: ImportStatus
    percent_complete: int = Field(ge=0, le=100)
    message: str = ""
    summary: FinalSummary | None = None


ProgressMessage = Annotated[ProgressEvent | StatusMessage, Field(discriminator="kind")]
