"""Repository for learned pattern documents."""

from datetime import UTC, datetime

from bson import ObjectId
from pydantic_mongo import AsyncAbstractRepository
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from cue_importer.mongodb.client import get_mongodb_client
from cue_importer.mongodb.schemas import PatternDocument
from cue_importer.pattern_engine.schemas import Pattern


def _object_id(pattern_id: str) -> ObjectId | None:
    return ObjectId(pattern_id) if ObjectId.is_valid(pattern_id) else None


class PatternRepository(AsyncAbstractRepository[PatternDocument]):
    """Patterns keyed by ``(pattern_type, condition, action)``.

    Inserts go through ``$setOnInsert`` upserts on the natural key and every
    counter or confidence change is a single server-side update, so
    concurrent learners never lose an update or create duplicates.
    """

    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        collection_name = "patterns"

    @classmethod
    def create(cls) -> "PatternRepository":
        """Create a repository instance with the default database."""
        client = get_mongodb_client()
        return cls(client.database)  # pyright: ignore[reportArgumentType]

    async def ensure_indexes(self) -> None:
        collection = self.get_collection()
        await collection.create_index([("natural_key", ASCENDING)], unique=True)
        await collection.create_index([("confidence", DESCENDING)])

    async def list_patterns(self, min_confidence: float = 0.0) -> list[Pattern]:
        collection = self.get_collection()
        cursor = collection.find({"confidence": {"$gte": min_confidence}}).sort("confidence", DESCENDING)
        return [PatternDocument(**doc).to_pattern() async for doc in cursor]

    async def get_pattern(self, pattern_id: str) -> Pattern | None:
        object_id = _object_id(pattern_id)
        if object_id is None:
            return None
        doc = await self.find_one_by_id(object_id)
        return doc.to_pattern() if doc is not None else None

    async def find_pattern(self, pattern: Pattern) -> Pattern | None:
        natural_key = PatternDocument.from_pattern(pattern).natural_key
        doc = await self.find_one_by({"natural_key": natural_key})
        return doc.to_pattern() if doc is not None else None

    async def upsert_pattern(self, pattern: Pattern) -> Pattern:
        """Insert the pattern unless one with the same natural key exists.

        Returns:
            The stored pattern, which is the existing one when the key was taken.
        """
        doc = PatternDocument.from_pattern(pattern)
        collection = self.get_collection()
        await collection.update_one(
            {"natural_key": doc.natural_key},
            {"$setOnInsert": doc.model_dump(exclude={"id"}, mode="python")},
            upsert=True,
        )
        stored = await collection.find_one({"natural_key": doc.natural_key})
        if stored is None:
            msg = f"Pattern {doc.natural_key} was not stored"
            raise RuntimeError(msg)
        return PatternDocument(**stored).to_pattern()

    async def delete_pattern(self, pattern_id: str) -> bool:
        object_id = _object_id(pattern_id)
        if object_id is None:
            return False
        result = await self.get_collection().delete_one({"_id": object_id})
        return result.deleted_count > 0

    async def increment_usage(self, pattern_id: str) -> None:
        object_id = _object_id(pattern_id)
        if object_id is None:
            return
        now = datetime.now(UTC)
        await self.get_collection().update_one(
            {"_id": object_id},
            {"$inc": {"times_applied": 1}, "$set": {"last_applied_at": now, "updated_at": now}},
        )

    async def adjust_confidence(
        self,
        pattern_id: str,
        delta: float,
        *,
        minimum: float = 0.0,
        maximum: float = 1.0,
        counter: str | None = None,
    ) -> Pattern | None:
        """Clamp ``confidence + delta`` into ``[minimum, maximum]`` in one update."""
        object_id = _object_id(pattern_id)
        if object_id is None:
            return None

        updates: dict[str, object] = {
            "confidence": {
                "$round": [
                    {"$min": [maximum, {"$max": [minimum, {"$add": ["$confidence", delta]}]}]},
                    4,
                ]
            },
            "updated_at": datetime.now(UTC),
        }
        if counter is not None:
            updates[counter] = {"$add": [{"$ifNull": [f"${counter}", 0]}, 1]}

        updated = await self.get_collection().find_one_and_update(
            {"_id": object_id},
            [{"$set": updates}],
            return_document=ReturnDocument.AFTER,
        )
        return PatternDocument(**updated).to_pattern() if updated is not None else None

    async def set_confidence(self, pattern_id: str, confidence: float) -> bool:
        object_id = _object_id(pattern_id)
        if object_id is None:
            return False
        result = await self.get_collection().update_one(
            {"_id": object_id},
            {"$set": {"confidence": max(0.0, min(1.0, confidence)), "updated_at": datetime.now(UTC)}},
        )
        return result.matched_count > 0
