"""Categorizer schemas."""

from cue_importer.categorizer.schemas.categorization_result import CategorizationResult
from cue_importer.categorizer.schemas.categorizer_thresholds import CategorizerThresholds
from cue_importer.categorizer.schemas.classified_clip import ClassifiedClip
from cue_importer.categorizer.schemas.cue_type import CueType

__all__ = [
    "CategorizationResult",
    "CategorizerThresholds",
    "ClassifiedClip",
    "CueType",
]
