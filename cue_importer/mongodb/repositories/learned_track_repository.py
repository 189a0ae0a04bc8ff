"""Repository for the learned track database."""

import re
from datetime import UTC, datetime

from pydantic_mongo import AsyncAbstractRepository
from pymongo import ASCENDING

from cue_importer.enrichment.learned_db import clean_track_name
from cue_importer.enrichment.schemas import LearnedTrack
from cue_importer.mongodb.client import get_mongodb_client
from cue_importer.mongodb.schemas import LearnedTrackDocument


class LearnedTrackRepository(AsyncAbstractRepository[LearnedTrackDocument]):
    """Tracks approved in earlier imports, one per normalised name and catalog code."""

    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        collection_name = "learned_tracks"

    @classmethod
    def create(cls) -> "LearnedTrackRepository":
        """Create a repository instance with the default database."""
        client = get_mongodb_client()
        return cls(client.database)  # pyright: ignore[reportArgumentType]

    async def ensure_indexes(self) -> None:
        await self.get_collection().create_index(
            [("normalized_name", ASCENDING), ("catalog_code", ASCENDING)], unique=True
        )

    async def query(self, search_term: str, limit: int) -> list[LearnedTrack]:
        """Tracks whose name or catalog code contains ``search_term``, ignoring case."""
        pattern = {"$regex": re.escape(search_term), "$options": "i"}
        cursor = (
            self.get_collection()
            .find({"$or": [{"track_name": pattern}, {"catalog_code": pattern}]})
            .limit(limit)
        )
        return [LearnedTrackDocument(**doc).to_track() async for doc in cursor]

    async def upsert_track(self, track: LearnedTrack) -> None:
        """Insert or update a track by its natural key.

        Empty values never overwrite stored ones.
        """
        catalog_code = track.catalog_code.upper() if track.catalog_code else None
        updates: dict[str, object] = {
            "track_name": track.track_name,
            "updated_at": datetime.now(UTC),
        }
        for name in ("composer", "publisher", "library", "artist"):
            value = getattr(track, name)
            if value:
                updates[name] = value

        await self.get_collection().update_one(
            {"normalized_name": clean_track_name(track.track_name), "catalog_code": catalog_code},
            {"$set": updates, "$inc": {"times_used": 1}},
            upsert=True,
        )
