"""Learned pattern routes."""

from fastapi import APIRouter, Depends, HTTPException

from cue_importer.api import providers
from cue_importer.api.schemas import (
    BatchChoicesRequest,
    ChoicesRequest,
    LearnedPatternResponse,
    PatternOverrideRequest,
    RecordChoiceRequest,
    UpdateConfidenceRequest,
)
from cue_importer.pattern_engine import PatternEngine
from cue_importer.pattern_engine.schemas import BatchChoiceGroup, InteractiveChoices, Pattern

router = APIRouter()


def _require_engine(
    engine: PatternEngine | None = Depends(providers.pattern_engine),
) -> PatternEngine:
    if engine is None:
        raise HTTPException(status_code=503, detail="Pattern store is not configured")
    return engine


@router.get("", response_model=list[Pattern])
async def list_patterns(engine: PatternEngine = Depends(_require_engine)) -> list[Pattern]:
    """List all learned patterns, highest confidence first."""
    return await engine.get_all_patterns()


@router.delete("/{pattern_id}")
async def delete_pattern(
    pattern_id: str,
    engine: PatternEngine = Depends(_require_engine),
) -> dict[str, str]:
    """Delete a pattern."""
    if not await engine.delete_pattern(pattern_id):
        raise HTTPException(status_code=404, detail="Pattern not found")
    return {"status": "deleted", "pattern_id": pattern_id}


@router.put("/{pattern_id}/confidence")
async def update_confidence(
    pattern_id: str,
    request: UpdateConfidenceRequest,
    engine: PatternEngine = Depends(_require_engine),
) -> dict[str, str]:
    """Set a pattern's confidence; values outside [0, 1] are clamped."""
    if not await engine.update_pattern_confidence(pattern_id, request.confidence):
        raise HTTPException(status_code=404, detail="Pattern not found")
    return {"status": "updated", "pattern_id": pattern_id}


@router.post("/suggestions", response_model=InteractiveChoices)
async def get_choices(
    request: ChoicesRequest,
    engine: PatternEngine = Depends(_require_engine),
) -> InteractiveChoices:
    """Options to offer for one field of one track."""
    return await engine.get_interactive_choices(request.track, request.field)


@router.post("/suggestions/batch", response_model=list[BatchChoiceGroup])
async def get_batch_choices(
    request: BatchChoicesRequest,
    engine: PatternEngine = Depends(_require_engine),
) -> list[BatchChoiceGroup]:
    """Options per library and track type group."""
    return await engine.get_batch_interactive_choices(request.tracks, request.field)


@router.post("/choices", response_model=LearnedPatternResponse)
async def record_choice(
    request: RecordChoiceRequest,
    engine: PatternEngine = Depends(_require_engine),
) -> LearnedPatternResponse:
    """Record a user's choice; may create or strengthen a pattern."""
    pattern = await engine.record_user_choice(
        request.track, request.field, request.chosen, request.all_options
    )
    return LearnedPatternResponse(status="recorded", pattern=pattern)


@router.post("/overrides", response_model=LearnedPatternResponse)
async def record_override(
    request: PatternOverrideRequest,
    engine: PatternEngine = Depends(_require_engine),
) -> LearnedPatternResponse:
    """Record that a user replaced a pattern-filled value."""
    pattern = await engine.record_pattern_override(
        request.track,
        request.field,
        request.pattern_id,
        request.old_value,
        request.new_value,
    )
    if pattern is None:
        raise HTTPException(status_code=404, detail="Pattern not found")
    return LearnedPatternResponse(status="recorded", pattern=pattern)
