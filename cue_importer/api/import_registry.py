"""In-memory registry of imports started through the API."""

from datetime import UTC, datetime
from typing import Any

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pipeline import ImportRunner
from cue_importer.pipeline.schemas import ImportResult, ImportStatus


class ImportRecord(BaseCueModel):
    """State of one import."""

    import_id: str
    file_path: str
    status: ImportStatus = ImportStatus.QUEUED
    error_message: str | None = None
    result: ImportResult | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None


class ImportRegistry:
    """Tracks import records and the runners executing them."""

    def __init__(self) -> None:
        self._records: dict[str, ImportRecord] = {}
        self._runners: dict[str, ImportRunner] = {}

    def register(self, runner: ImportRunner, file_path: str) -> ImportRecord:
        record = ImportRecord(import_id=runner.import_id, file_path=file_path)
        self._records[record.import_id] = record
        self._runners[record.import_id] = runner
        return record

    def get(self, import_id: str) -> ImportRecord | None:
        return self._records.get(import_id)

    def update(self, import_id: str, **changes: Any) -> ImportRecord:
        """Replace the stored record with an updated copy."""
        record = self._records[import_id]
        if changes.get("status") in (ImportStatus.COMPLETED, ImportStatus.FAILED, ImportStatus.CANCELLED):
            changes.setdefault("completed_at", datetime.now(UTC))
            self._runners.pop(import_id, None)
        updated = record.model_copy(update=changes)
        self._records[import_id] = updated
        return updated

    def cancel(self, import_id: str) -> bool:
        """Ask a queued or running import to stop. Returns False if it is not active."""
        runner = self._runners.get(import_id)
        if runner is None:
            return False
        runner.cancel()
        return True
