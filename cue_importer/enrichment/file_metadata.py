"""Fill cue fields from the tags of the media files the project references."""

import asyncio
import logging
import time
from collections import Counter
from pathlib import Path
from typing import Any

import mutagen
from mutagen import MutagenError

from cue_importer.classifier.recognizers import strip_audio_extension
from cue_importer.common.stage_summary import StageSummary
from cue_importer.enrichment.concurrency import DEFAULT_CONCURRENCY, map_bounded
from cue_importer.enrichment.protocols import MetadataReader
from cue_importer.enrichment.schemas import (
    EnrichedCue,
    EnrichedField,
    FileMetadata,
    ProvenanceSource,
)

logger = logging.getLogger(__name__)

STEP_NAME = "Reading Metadata"

# Artist tags naming one of these are a label, not a performer
LIBRARY_NAMES = (
    "bmg production music",
    "bmg",
    "bmgpm",
    "apm music",
    "apm",
    "extreme music",
    "universal production music",
    "musicbed",
    "artlist",
    "epidemic sound",
    "audiojungle",
    "killer tracks",
)

PUBLISHER_KEYWORDS = (
    "music",
    "publishing",
    "entertainment",
    "records",
    "rights",
    "management",
    "editions",
    "songs",
    "media",
)

# Easy tag names first, then raw ID3 frames for WAV and AIFF files
_TAG_KEYS: dict[str, tuple[str, ...]] = {
    "title": ("title", "TIT2"),
    "artist": ("artist", "TPE1"),
    "album": ("album", "TALB"),
    "composer": ("composer", "TCOM"),
    "label": ("organization", "label", "publisher", "TPUB"),
}


def is_library_name(name: str | None) -> bool:
    if not name:
        return False
    lowered = name.lower()
    return any(library in lowered for library in LIBRARY_NAMES)


def is_publisher_name(name: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in PUBLISHER_KEYWORDS)


def separate_composer_publisher(entries: list[str]) -> tuple[str, str]:
    """Split a composer tag into composers and the publishers mixed into it.

    An entry is a publisher when its name, ignoring parenthesised parts such
    as ``(BMI)``, contains a publisher keyword.

    Returns:
        Comma-joined composers and comma-joined publishers.
    """
    composers: list[str] = []
    publishers: list[str] = []
    for entry in entries:
        if not entry or not entry.strip():
            continue
        base_name = _strip_parenthesised(entry)
        if is_publisher_name(base_name):
            publishers.append(entry.strip())
        else:
            composers.append(entry.strip())
    return ", ".join(composers), ", ".join(publishers)


def _strip_parenthesised(text: str) -> str:
    result: list[str] = []
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif not depth:
            result.append(char)
    return "".join(result).strip()


def _tag_values(tags: Any, keys: tuple[str, ...]) -> list[str]:
    for key in keys:
        value = tags.get(key)
        if value is None:
            continue
        texts = getattr(value, "text", value)
        if isinstance(texts, str):
            texts = [texts]
        values = [str(text).strip() for text in texts if str(text).strip()]
        if values:
            return values
    return []


def read_audio_metadata(path: Path) -> FileMetadata | None:
    """Read title, artist, album, composer and publisher tags with mutagen.

    The label/organization tag becomes the publisher, together with any
    publisher-like entries found in the composer tag.
    """
    try:
        audio = mutagen.File(path, easy=True)
    except MutagenError as e:
        logger.warning("[metadata] Could not read tags from %s: %s", path.name, e)
        return None

    if audio is None or audio.tags is None:
        return None

    tags = audio.tags
    composers, extracted_publishers = separate_composer_publisher(
        _tag_values(tags, _TAG_KEYS["composer"])
    )
    labels = ", ".join(_tag_values(tags, _TAG_KEYS["label"]))
    publisher = ", ".join(part for part in (labels, extracted_publishers) if part)

    def first(name: str) -> str | None:
        values = _tag_values(tags, _TAG_KEYS[name])
        return values[0] if values else None

    return FileMetadata(
        title=first("title"),
        artist=first("artist"),
        album=first("album"),
        composer=composers or None,
        publisher=publisher or None,
    )


class MutagenMetadataReader:
    """``MetadataReader`` backed by mutagen, run off the event loop."""

    async def read(self, path: Path) -> FileMetadata | None:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, read_audio_metadata, path)


def find_media_path(cue: EnrichedCue, file_paths: dict[str, str]) -> Path | None:
    """Look up a cue's media file by original name, name without extension, then display name."""
    for key in (cue.original_name, strip_audio_extension(cue.original_name), cue.display_name):
        if key and key in file_paths:
            return Path(file_paths[key])
    return None


def apply_file_metadata(cue: EnrichedCue, metadata: FileMetadata) -> EnrichedCue:
    """Write tag values into empty fields. Library names in the artist tag go to ``label``."""
    source = ProvenanceSource.FILE_METADATA
    enriched = cue.with_field(EnrichedField.COMPOSER, metadata.composer, source, 1.0)
    enriched = enriched.with_field(EnrichedField.PUBLISHER, metadata.publisher, source, 1.0)

    if is_library_name(metadata.artist):
        enriched = enriched.with_field(EnrichedField.LABEL, metadata.artist, source, 1.0)
    else:
        enriched = enriched.with_field(EnrichedField.ARTIST, metadata.artist, source, 1.0)

    return enriched.with_field(EnrichedField.SOURCE, metadata.album, source, 1.0)


async def enrich_with_metadata(
    cues: list[EnrichedCue],
    file_paths: dict[str, str],
    reader: MetadataReader | None,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: float = 10.0,
) -> tuple[list[EnrichedCue], StageSummary]:
    """Read the tags of every cue's media file and fill empty fields from them.

    Missing files and unreadable tags leave the cue unchanged.
    """
    started = time.perf_counter()
    if reader is None:
        return cues, StageSummary(
            step_name=STEP_NAME,
            input_count=len(cues),
            output_count=len(cues),
            skipped=True,
            reason="no metadata reader configured",
        )

    async def enrich_one(cue: EnrichedCue) -> tuple[EnrichedCue, str]:
        path = find_media_path(cue, file_paths)
        if path is None or not path.exists():
            return cue, "files_not_found"
        try:
            metadata = await asyncio.wait_for(reader.read(path), timeout=timeout)
        except Exception as e:
            logger.warning("[metadata] Failed reading %s: %s", path.name, e)
            return cue, "failed"
        if metadata is None:
            return cue, "no_tags"
        return apply_file_metadata(cue, metadata), "enriched"

    results = await map_bounded(cues, enrich_one, concurrency)
    enriched = [cue for cue, _ in results]
    statuses = Counter(status for _, status in results)

    logger.info(
        "[metadata] %d enriched, %d files not found, %d failed",
        statuses["enriched"],
        statuses["files_not_found"],
        statuses["failed"],
    )

    return enriched, StageSummary(
        step_name=STEP_NAME,
        input_count=len(cues),
        output_count=len(enriched),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "enriched": statuses["enriched"],
            "files_not_found": statuses["files_not_found"],
            "no_tags": statuses["no_tags"],
            "failed": statuses["failed"],
        },
        samples=[
            f"{cue.display_name}: {cue.field_value(EnrichedField.COMPOSER)}"
            for cue in enriched
            if (value := cue.fields.get(EnrichedField.COMPOSER)) is not None
            and value.source == ProvenanceSource.FILE_METADATA
        ][:3],
    )
