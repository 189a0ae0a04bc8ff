"""Project parser schemas."""

from cue_importer.project_parser.schemas.parsed_project import ParsedProject
from cue_importer.project_parser.schemas.raw_clip import RawClip

__all__ = [
    "ParsedProject",
    "RawClip",
]
