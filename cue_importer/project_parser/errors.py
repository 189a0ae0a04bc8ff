"""Errors raised while reading a project container."""


class ProjectImportError(Exception):
    """Base class for fatal project import failures."""


class ProjectFileNotFoundError(ProjectImportError):
    """The project file does not exist or cannot be opened."""


class ProjectDecodeError(ProjectImportError):
    """The project file could not be decompressed or parsed as XML."""
