"""Cue type assignment for raw project clips."""

from cue_importer.categorizer.categorize import categorize_clip, categorize_clips

__all__ = [
    "categorize_clip",
    "categorize_clips",
]
