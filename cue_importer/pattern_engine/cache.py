"""Time-bounded cache of the pattern list."""

import time
from collections.abc import Callable

from cue_importer.pattern_engine.schemas import Pattern

DEFAULT_TTL_SECONDS = 300.0


class PatternCache:
    """Holds the last pattern list read from the store until it goes stale.

    Args:
        ttl_seconds: How long a loaded list stays fresh.
        clock: Monotonic seconds source; injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._patterns: list[Pattern] | None = None
        self._loaded_at: float | None = None

    def get(self) -> list[Pattern] | None:
        """Return the cached patterns, or None if empty or stale."""
        if self._patterns is None or self._loaded_at is None:
            return None
        if self._clock() - self._loaded_at > self.ttl_seconds:
            return None
        return self._patterns

    def set(self, patterns: list[Pattern]) -> None:
        self._patterns = list(patterns)
        self._loaded_at = self._clock()

    def invalidate(self) -> None:
        self._patterns = None
        self._loaded_at = None
