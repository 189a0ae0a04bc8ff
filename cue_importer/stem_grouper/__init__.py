"""Stem to parent cue grouping."""

from cue_importer.stem_grouper.group_stems import group_key, group_stems

__all__ = [
    "group_key",
    "group_stems",
]
