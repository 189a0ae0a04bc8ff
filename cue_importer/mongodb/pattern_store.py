"""``PatternStore`` backed by the pattern and user action repositories."""

from cue_importer.mongodb.repositories import PatternRepository, UserActionRepository
from cue_importer.pattern_engine.schemas import Pattern, UserAction


class MongoPatternStore:
    """Patterns and the user action log in MongoDB."""

    def __init__(self, patterns: PatternRepository, actions: UserActionRepository) -> None:
        self.patterns = patterns
        self.actions = actions

    @classmethod
    def create(cls) -> "MongoPatternStore":
        """Create a store using the default database."""
        return cls(PatternRepository.create(), UserActionRepository.create())

    async def ensure_indexes(self) -> None:
        await self.patterns.ensure_indexes()
        await self.actions.ensure_indexes()

    async def list_patterns(self, min_confidence: float = 0.0) -> list[Pattern]:
        return await self.patterns.list_patterns(min_confidence)

    async def get_pattern(self, pattern_id: str) -> Pattern | None:
        return await self.patterns.get_pattern(pattern_id)

    async def find_pattern(self, pattern: Pattern) -> Pattern | None:
        return await self.patterns.find_pattern(pattern)

    async def upsert_pattern(self, pattern: Pattern) -> Pattern:
        return await self.patterns.upsert_pattern(pattern)

    async def delete_pattern(self, pattern_id: str) -> bool:
        return await self.patterns.delete_pattern(pattern_id)

    async def increment_usage(self, pattern_id: str) -> None:
        await self.patterns.increment_usage(pattern_id)

    async def adjust_confidence(
        self,
        pattern_id: str,
        delta: float,
        *,
        minimum: float = 0.0,
        maximum: float = 1.0,
        counter: str | None = None,
    ) -> Pattern | None:
        return await self.patterns.adjust_confidence(
            pattern_id, delta, minimum=minimum, maximum=maximum, counter=counter
        )

    async def set_confidence(self, pattern_id: str, confidence: float) -> bool:
        return await self.patterns.set_confidence(pattern_id, confidence)

    async def record_action(self, action: UserAction) -> None:
        await self.actions.record_action(action)

    async def recent_actions(self, field: str, new_value: str, limit: int) -> list[UserAction]:
        return await self.actions.recent_actions(field, new_value, limit)
