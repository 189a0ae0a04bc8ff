"""Streaming reader for gzip-compressed NLE project files.

The container is decompressed in chunks and fed to an lxml pull parser, so the
document is never held in memory. Reading happens in two passes:

1. While streaming, the alias graph (SubClip -> Clip -> Name) is built and every
   audio track item placement is buffered as ``(start, end, subclip_ref)``.
2. After the last chunk, the buffered placements are resolved against the
   finished graph. Placements routinely reference clips defined later in the
   file, which is why resolution cannot happen inline.
"""

import gzip
import logging
import re
import time
import zlib
from collections.abc import Iterator
from pathlib import Path

from lxml import etree

from cue_importer.classifier.recognizers import AUDIO_EXTENSION_PATTERN
from cue_importer.project_parser.errors import ProjectDecodeError, ProjectFileNotFoundError
from cue_importer.project_parser.paths import parse_spot_title, resolve_file_path
from cue_importer.project_parser.schemas import ParsedProject, RawClip

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

BIN_NAMES = frozenset({"Root Bin", "Audio", "Balance"})


class _Placement:
    """A buffered audio track item awaiting resolution."""

    __slots__ = ("end", "start", "subclip_ref")

    def __init__(self, start: int, end: int, subclip_ref: str) -> None:
        self.start = start
        self.end = end
        self.subclip_ref = subclip_ref


class _ProjectGraph:
    """Pass 1 state: alias maps, buffered placements and collected names."""

    def __init__(self) -> None:
        self.subclip_to_clip: dict[str, str] = {}
        self.clip_to_name: dict[str, str] = {}
        self.file_paths: dict[str, str] = {}
        # Insertion-ordered set of audio file names
        self.audio_names: dict[str, None] = {}
        self.placements: list[_Placement] = []
        self.skipped_values = 0

        self._current_subclip_id: str | None = None
        self._current_clip_id: str | None = None
        self._in_track_item = False
        self._item_start: int | None = None
        self._item_end: int | None = None
        self._item_subclip_ref: str | None = None

    def start(self, tag: str, element: etree._Element) -> None:
        if tag == "AudioClipTrackItem":
            self._in_track_item = True
            self._item_start = None
            self._item_end = None
            self._item_subclip_ref = None
            return

        if tag == "SubClip":
            if self._in_track_item:
                ref = _get_attribute(element, "ObjectRef")
                if ref:
                    self._item_subclip_ref = ref
            else:
                self._current_subclip_id = _get_attribute(element, "ObjectID")
            return

        if tag == "Clip":
            if self._current_subclip_id:
                ref = _get_attribute(element, "ObjectRef")
                if ref:
                    self.subclip_to_clip[self._current_subclip_id] = ref
            else:
                object_id = _get_attribute(element, "ObjectID")
                if object_id:
                    self._current_clip_id = object_id

    def end(self, tag: str, element: etree._Element) -> None:
        text = (element.text or "").strip()

        if tag == "ActualMediaFilePath" and text:
            filename = re.split(r"[\\/]", text)[-1]
            self.file_paths[filename] = text
            self.file_paths[AUDIO_EXTENSION_PATTERN.sub("", filename)] = text

        elif tag == "Name" and text:
            if not self._in_track_item:
                if self._current_subclip_id:
                    self.clip_to_name[self._current_subclip_id] = text
                elif self._current_clip_id:
                    self.clip_to_name[self._current_clip_id] = text
            if AUDIO_EXTENSION_PATTERN.search(text):
                self.audio_names[text] = None

        elif tag in ("Start", "End") and self._in_track_item and text:
            value = self._parse_ticks(tag, text)
            if value is not None:
                if tag == "Start" and self._item_start is None:
                    self._item_start = value
                elif tag == "End" and self._item_end is None:
                    self._item_end = value

        elif tag == "SubClip":
            if not self._in_track_item:
                self._current_subclip_id = None

        elif tag == "Clip":
            if self._current_clip_id and not self._current_subclip_id:
                self._current_clip_id = None

        elif tag == "AudioClipTrackItem" and self._in_track_item:
            if (
                self._item_start is not None
                and self._item_end is not None
                and self._item_subclip_ref
            ):
                self.placements.append(
                    _Placement(self._item_start, self._item_end, self._item_subclip_ref)
                )
            self._in_track_item = False
            self._item_start = None
            self._item_end = None
            self._item_subclip_ref = None

    def _parse_ticks(self, tag: str, text: str) -> int | None:
        try:
            return int(text)
        except ValueError:
            self.skipped_values += 1
            logger.debug("[parser] Skipping non-integer <%s> value: %r", tag, text)
            return None


def _get_attribute(element: etree._Element, name: str) -> str | None:
    """Look up an attribute ignoring case."""
    value = element.get(name)
    if value:
        return value
    lowered = name.lower()
    for key, attr_value in element.attrib.items():
        if str(key).lower() == lowered and attr_value:
            return str(attr_value)
    return None


def _local_name(element: etree._Element) -> str | None:
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def is_junk_name(name: str) -> bool:
    """Bin names and names editors mark as unused."""
    return (
        name in BIN_NAMES
        or "JUNK" in name
        or "OLD" in name
        or name.startswith(("z", "*"))
    )


def _read_chunks(path: Path, chunk_size: int) -> Iterator[bytes]:
    try:
        with gzip.open(path, "rb") as stream:
            while chunk := stream.read(chunk_size):
                yield chunk
    except FileNotFoundError as e:
        msg = (
            f"File not found: {path}. If the file is on a network drive, "
            "copy it locally first."
        )
        raise ProjectFileNotFoundError(msg) from e
    except PermissionError as e:
        msg = f"Cannot read project file {path}: {e}. Try copying the file locally first."
        raise ProjectFileNotFoundError(msg) from e
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        msg = f"Failed to decompress project file {path}: {e}"
        raise ProjectDecodeError(msg) from e


def _stream_graph(path: Path, chunk_size: int) -> _ProjectGraph:
    """Pass 1: stream the document and build the alias graph."""
    graph = _ProjectGraph()
    parser = etree.XMLPullParser(events=("start", "end"), recover=True, huge_tree=True)

    def drain() -> None:
        for event, element in parser.read_events():
            tag = _local_name(element)
            if tag is None:
                continue
            if event == "start":
                graph.start(tag, element)
                continue
            graph.end(tag, element)
            # Processed subtrees are no longer needed
            element.clear(keep_tail=True)
            while element.getprevious() is not None:
                parent = element.getparent()
                if parent is None:
                    break
                del parent[0]

    try:
        for chunk in _read_chunks(path, chunk_size):
            parser.feed(chunk)
            drain()
        parser.close()
        drain()
    except etree.XMLSyntaxError as e:
        msg = f"Failed to parse project XML {path}: {e}"
        raise ProjectDecodeError(msg) from e

    for entry in parser.error_log:
        logger.debug("[parser] Recovered from malformed XML: %s", entry.message)

    return graph


def _resolve_placements(graph: _ProjectGraph) -> tuple[dict[str, tuple[int, int, int]], int]:
    """Pass 2: resolve buffered placements to clip names.

    Returns:
        name -> (total_ticks, max_ticks, instance_count), and the number of
        placements that could not be resolved.
    """
    durations: dict[str, tuple[int, int, int]] = {}
    unresolved = 0

    for placement in graph.placements:
        duration_ticks = max(placement.end - placement.start, 0)
        clip_ref = graph.subclip_to_clip.get(placement.subclip_ref)
        clip_name = graph.clip_to_name.get(clip_ref) if clip_ref else None
        if not clip_name:
            clip_name = graph.clip_to_name.get(placement.subclip_ref)
        if not clip_name:
            unresolved += 1
            continue

        total, longest, count = durations.get(clip_name, (0, 0, 0))
        durations[clip_name] = (total + duration_ticks, max(longest, duration_ticks), count + 1)

    return durations, unresolved


def parse_project(
    file_path: str | Path,
    chunk_size: int = CHUNK_SIZE,
    home: Path | None = None,
) -> ParsedProject:
    """Read a project container into raw clips.

    Args:
        file_path: Path, ``file://`` or ``smb://`` URL of the project file.
        chunk_size: Decompressed bytes fed to the parser per step.
        home: Home directory searched when the path does not exist.

    Returns:
        The parsed project. Clip ids are ``clip-<n>`` in discovery order.

    Raises:
        ProjectFileNotFoundError: The file does not exist or cannot be read.
        ProjectDecodeError: The file is not valid gzip or not parseable XML.
    """
    started = time.perf_counter()
    resolved = resolve_file_path(file_path, home=home)
    if not resolved.is_file():
        msg = (
            f"File not found: {file_path} (resolved to: {resolved}). If the file is "
            "on a network drive, copy it locally first."
        )
        raise ProjectFileNotFoundError(msg)

    logger.info("[parser] Streaming %s", resolved)
    graph = _stream_graph(resolved, chunk_size)
    durations, unresolved = _resolve_placements(graph)

    clips: list[RawClip] = []
    for name in graph.audio_names:
        if is_junk_name(name):
            continue
        total, longest, count = durations.get(name, (0, 0, 0))
        clips.append(
            RawClip(
                id=f"clip-{len(clips) + 1}",
                original_name=name,
                total_ticks=total,
                max_ticks=longest,
                instance_count=count,
            )
        )

    project_name = resolved.name.removesuffix(".prproj")
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    logger.info(
        "[parser] Parsed %d clips, %d placements (%d unresolved), %d media paths in %dms",
        len(clips),
        len(graph.placements),
        unresolved,
        len(graph.file_paths) // 2,
        elapsed_ms,
    )

    return ParsedProject(
        file_path=str(resolved),
        project_name=project_name,
        spot_title=parse_spot_title(project_name),
        clips=clips,
        file_paths=graph.file_paths,
        placement_count=len(graph.placements),
        unresolved_placement_count=unresolved,
        skipped_value_count=graph.skipped_values,
        elapsed_ms=elapsed_ms,
    )
