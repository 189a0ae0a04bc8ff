"""Repository for the user action log."""

from pydantic_mongo import AsyncAbstractRepository
from pymongo import DESCENDING

from cue_importer.mongodb.client import get_mongodb_client
from cue_importer.mongodb.schemas import UserActionDocument
from cue_importer.pattern_engine.schemas import UserAction


class UserActionRepository(AsyncAbstractRepository[UserActionDocument]):
    """Append-only log of user corrections."""

    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        collection_name = "user_actions"

    @classmethod
    def create(cls) -> "UserActionRepository":
        """Create a repository instance with the default database."""
        client = get_mongodb_client()
        return cls(client.database)  # pyright: ignore[reportArgumentType]

    async def ensure_indexes(self) -> None:
        await self.get_collection().create_index(
            [("field", 1), ("new_value", 1), ("created_at", DESCENDING)]
        )

    async def record_action(self, action: UserAction) -> None:
        await self.save(UserActionDocument.from_action(action))

    async def recent_actions(self, field: str, new_value: str, limit: int) -> list[UserAction]:
        """Newest actions that set ``field`` to ``new_value``.

        Args:
            field: The cue field.
            new_value: The value the user chose.
            limit: Maximum number of actions returned.

        Returns:
            Actions ordered newest first.
        """
        cursor = (
            self.get_collection()
            .find({"field": field, "new_value": new_value})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        return [UserActionDocument(**doc).to_action() async for doc in cursor]
