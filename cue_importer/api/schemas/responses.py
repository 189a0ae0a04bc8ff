"""API response schemas."""

from datetime import datetime

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pattern_engine.schemas import Pattern
from cue_importer.pipeline.schemas import ImportResult, ImportStatus


class ImportResponse(BaseCueModel):
    """Response containing import state, and the result once complete."""

    import_id: str
    file_path: str
    status: ImportStatus
    error_message: str | None = None
    created_at: datetime
    completed_at: datetime | None = None
    result: ImportResult | None = None


class LearnedPatternResponse(BaseCueModel):
    """Response after recording a choice or override."""

    status: str
    pattern: Pattern | None = None
