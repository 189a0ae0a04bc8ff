"""External collaborators used by the enrichment chain."""

from pathlib import Path
from typing import Protocol

from cue_importer.enrichment.schemas import FileMetadata, LearnedTrack


class MetadataReader(Protocol):
    """Reads tags from audio files."""

    async def read(self, path: Path) -> FileMetadata | None: ...


class TrackDatabase(Protocol):
    """The learned track database."""

    async def query(self, search_term: str, limit: int) -> list[LearnedTrack]:
        """Tracks whose name or catalog code contains ``search_term``."""
        ...

    async def upsert_track(self, track: LearnedTrack) -> None: ...


class RemoteClassifier(Protocol):
    """Classifies filenames the local heuristics were unsure about."""

    async def classify_batch(self, filenames: list[str]) -> str:
        """Return the raw model reply for a numbered list of filenames."""
        ...
