"""MongoDB repositories for cue importer entities."""

from cue_importer.mongodb.repositories.learned_track_repository import LearnedTrackRepository
from cue_importer.mongodb.repositories.pattern_repository import PatternRepository
from cue_importer.mongodb.repositories.user_action_repository import UserActionRepository

__all__ = [
    "LearnedTrackRepository",
    "PatternRepository",
    "UserActionRepository",
]
