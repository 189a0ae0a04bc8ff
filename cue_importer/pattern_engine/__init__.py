"""Learned patterns that fill and suggest cue fields."""

from cue_importer.pattern_engine.cache import PatternCache
from cue_importer.pattern_engine.engine import PatternEngine
from cue_importer.pattern_engine.seed_patterns import DEFAULT_PATTERNS, seed_default_patterns
from cue_importer.pattern_engine.store import PatternStore

__all__ = [
    "DEFAULT_PATTERNS",
    "PatternCache",
    "PatternEngine",
    "PatternStore",
    "seed_default_patterns",
]
