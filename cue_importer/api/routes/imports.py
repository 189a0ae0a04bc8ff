"""Import management routes."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from cue_importer.api import providers
from cue_importer.api.import_registry import ImportRecord, ImportRegistry
from cue_importer.api.schemas import CreateImportRequest, ImportResponse
from cue_importer.mongodb.repositories import LearnedTrackRepository
from cue_importer.pattern_engine import PatternEngine
from cue_importer.pipeline import ImportCancelledError, ImportConfig, ImportRunner, summarize
from cue_importer.pipeline.schemas import ImportStatus

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(record: ImportRecord) -> ImportResponse:
    """Convert ImportRecord to ImportResponse."""
    return ImportResponse(
        import_id=record.import_id,
        file_path=record.file_path,
        status=record.status,
        error_message=record.error_message,
        created_at=record.created_at,
        completed_at=record.completed_at,
        result=record.result,
    )


@router.post("", response_model=ImportResponse)
async def create_import(
    request: CreateImportRequest,
    background_tasks: BackgroundTasks,
    registry: ImportRegistry = Depends(providers.import_registry),
    config: ImportConfig = Depends(providers.import_config),
    engine: PatternEngine | None = Depends(providers.pattern_engine),
    tracks: LearnedTrackRepository | None = Depends(providers.track_database),
) -> ImportResponse:
    """Start importing a project file."""
    overrides: dict[str, object] = {}
    if request.fps is not None:
        overrides["fps"] = request.fps
    if request.remote_classifier_enabled is not None:
        overrides["remote_classifier_enabled"] = request.remote_classifier_enabled
    run_config = config.model_copy(update=overrides)

    runner = ImportRunner(
        config=run_config,
        track_database=tracks,
        pattern_engine=engine,
        remote_classifier=providers.remote_classifier() if run_config.remote_classifier_enabled else None,
    )
    record = registry.register(runner, request.file_path)
    logger.info("[import=%s] Queued import of %s", record.import_id, request.file_path)

    background_tasks.add_task(_run_import, runner, registry, request.file_path)
    return _to_response(record)


async def _run_import(runner: ImportRunner, registry: ImportRegistry, file_path: str) -> None:
    """Run an import and store its outcome."""
    registry.update(runner.import_id, status=ImportStatus.RUNNING)
    try:
        result = await runner.run(file_path)
    except ImportCancelledError as e:
        registry.update(runner.import_id, status=ImportStatus.CANCELLED, error_message=str(e))
    except Exception as e:
        # Already logged and broadcast by the runner
        registry.update(
            runner.import_id,
            status=ImportStatus.FAILED,
            error_message=f"{type(e).__name__}: {e}",
        )
    else:
        registry.update(runner.import_id, status=ImportStatus.COMPLETED, result=result)


@router.get("/{import_id}", response_model=ImportResponse)
async def get_import(
    import_id: str,
    registry: ImportRegistry = Depends(providers.import_registry),
) -> ImportResponse:
    """Get an import by ID."""
    record = registry.get(import_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Import not found")
    return _to_response(record)


@router.get("/{import_id}/report", response_class=PlainTextResponse)
async def get_import_report(
    import_id: str,
    registry: ImportRegistry = Depends(providers.import_registry),
) -> str:
    """Get the text summary of a completed import."""
    record = registry.get(import_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Import not found")
    if record.result is None:
        raise HTTPException(status_code=409, detail="Import has no result yet")
    return summarize(record.result)


@router.post("/{import_id}/cancel")
async def cancel_import(
    import_id: str,
    registry: ImportRegistry = Depends(providers.import_registry),
) -> dict[str, str]:
    """Cancel a queued or running import."""
    if registry.get(import_id) is None:
        raise HTTPException(status_code=404, detail="Import not found")
    if not registry.cancel(import_id):
        raise HTTPException(status_code=400, detail="Import is not running")
    return {"status": "cancelling", "import_id": import_id}
