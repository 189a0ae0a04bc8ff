"""Streaming reader for gzip-compressed NLE project files."""

from cue_importer.project_parser.errors import (
    ProjectDecodeError,
    ProjectFileNotFoundError,
    ProjectImportError,
)
from cue_importer.project_parser.parse_project import parse_project

__all__ = [
    "ProjectDecodeError",
    "ProjectFileNotFoundError",
    "ProjectImportError",
    "parse_project",
]
