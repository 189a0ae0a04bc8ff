"""MongoDB document schemas."""

from cue_importer.mongodb.schemas.documents import (
    LearnedTrackDocument,
    PatternDocument,
    UserActionDocument,
    pattern_natural_key,
)

__all__ = [
    "LearnedTrackDocument",
    "PatternDocument",
    "UserActionDocument",
    "pattern_natural_key",
]
