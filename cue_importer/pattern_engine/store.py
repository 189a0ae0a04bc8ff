"""Persistence interface for patterns and the user action log."""

from typing import Protocol

from cue_importer.pattern_engine.schemas import Pattern, UserAction


class PatternStore(Protocol):
    """Where patterns and user actions live.

    Writes must be safe under concurrent learners: ``upsert_pattern`` inserts
    only when no pattern with the same natural key exists, and the counter and
    confidence updates are atomic on the stored record.
    """

    async def list_patterns(self, min_confidence: float = 0.0) -> list[Pattern]:
        """Patterns at or above ``min_confidence``, highest confidence first."""
        ...

    async def get_pattern(self, pattern_id: str) -> Pattern | None: ...

    async def find_pattern(self, pattern: Pattern) -> Pattern | None:
        """Look up the stored pattern sharing ``pattern``'s natural key."""
        ...

    async def upsert_pattern(self, pattern: Pattern) -> Pattern:
        """Insert ``pattern`` unless its natural key exists; return the stored one."""
        ...

    async def delete_pattern(self, pattern_id: str) -> bool: ...

    async def increment_usage(self, pattern_id: str) -> None:
        """Add one to ``times_applied``."""
        ...

    async def adjust_confidence(
        self,
        pattern_id: str,
        delta: float,
        *,
        minimum: float = 0.0,
        maximum: float = 1.0,
        counter: str | None = None,
    ) -> Pattern | None:
        """Atomically set ``confidence = clamp(confidence + delta)`` and bump ``counter``."""
        ...

    async def set_confidence(self, pattern_id: str, confidence: float) -> bool: ...

    async def record_action(self, action: UserAction) -> None: ...

    async def recent_actions(self, field: str, new_value: str, limit: int) -> list[UserAction]:
        """Newest actions that set ``field`` to ``new_value``."""
        ...
