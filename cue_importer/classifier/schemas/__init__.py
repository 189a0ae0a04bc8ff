"""Filename classifier schemas."""

from cue_importer.classifier.schemas.filename_match import FilenameMatch

__all__ = ["FilenameMatch"]
