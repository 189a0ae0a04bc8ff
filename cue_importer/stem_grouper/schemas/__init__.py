"""Stem grouper schemas."""

from cue_importer.stem_grouper.schemas.grouped_cue import GroupedCue

__all__ = ["GroupedCue"]
