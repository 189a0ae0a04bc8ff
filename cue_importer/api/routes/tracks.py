"""Learned track database routes."""

from fastapi import APIRouter, Depends, HTTPException, Query

from cue_importer.api import providers
from cue_importer.enrichment.protocols import TrackDatabase
from cue_importer.enrichment.schemas import LearnedTrack

router = APIRouter()


def _require_database(
    database: TrackDatabase | None = Depends(providers.track_database),
) -> TrackDatabase:
    if database is None:
        raise HTTPException(status_code=503, detail="Track database is not configured")
    return database


@router.get("", response_model=list[LearnedTrack])
async def search_tracks(
    search: str = Query(min_length=1),
    limit: int = Query(default=10, ge=1, le=100),
    database: TrackDatabase = Depends(_require_database),
) -> list[LearnedTrack]:
    """Tracks whose name or catalog code contains the search term."""
    return await database.query(search, limit)


@router.post("")
async def save_track(
    track: LearnedTrack,
    database: TrackDatabase = Depends(_require_database),
) -> dict[str, str]:
    """Remember an approved track so later imports can match it."""
    await database.upsert_track(track)
    return {"status": "saved", "track_name": track.track_name}
