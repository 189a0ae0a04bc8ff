"""Shared fixtures and in-memory collaborators for the cue importer tests."""

import gzip
from pathlib import Path
from xml.sax.saxutils import escape

import pytest

from cue_importer.categorizer.schemas import ClassifiedClip, CueType
from cue_importer.durations import calculate_durations
from cue_importer.enrichment.schemas import EnrichedCue, FileMetadata, LearnedTrack
from cue_importer.pattern_engine.schemas import Pattern, UserAction
from cue_importer.stem_grouper.schemas import GroupedCue

TICKS_PER_SECOND = 254016000000


class InMemoryPatternStore:
    """PatternStore keeping patterns and actions in dictionaries."""

    def __init__(self, patterns: list[Pattern] | None = None) -> None:
        self.patterns: dict[str, Pattern] = {}
        self.actions: list[UserAction] = []
        self._next_id = 1
        for pattern in patterns or []:
            self._insert(pattern)

    def _insert(self, pattern: Pattern) -> Pattern:
        stored = pattern.model_copy(update={"id": pattern.id or f"p{self._next_id}"})
        self._next_id += 1
        self.patterns[stored.id] = stored
        return stored

    @staticmethod
    def _key(pattern: Pattern) -> tuple:
        return (
            pattern.pattern_type,
            tuple(sorted(pattern.condition.items())),
            pattern.action.field,
            pattern.action.value,
            pattern.action.copy_from,
        )

    async def list_patterns(self, min_confidence: float = 0.0) -> list[Pattern]:
        matching = [p for p in self.patterns.values() if p.confidence >= min_confidence]
        return sorted(matching, key=lambda p: p.confidence, reverse=True)

    async def get_pattern(self, pattern_id: str) -> Pattern | None:
        return self.patterns.get(pattern_id)

    async def find_pattern(self, pattern: Pattern) -> Pattern | None:
        key = self._key(pattern)
        return next((p for p in self.patterns.values() if self._key(p) == key), None)

    async def upsert_pattern(self, pattern: Pattern) -> Pattern:
        existing = await self.find_pattern(pattern)
        if existing is not None:
            return existing
        return self._insert(pattern)

    async def delete_pattern(self, pattern_id: str) -> bool:
        return self.patterns.pop(pattern_id, None) is not None

    async def increment_usage(self, pattern_id: str) -> None:
        pattern = self.patterns.get(pattern_id)
        if pattern is not None:
            self.patterns[pattern_id] = pattern.model_copy(
                update={"times_applied": pattern.times_applied + 1}
            )

    async def adjust_confidence(
        self,
        pattern_id: str,
        delta: float,
        *,
        minimum: float = 0.0,
        maximum: float = 1.0,
        counter: str | None = None,
    ) -> Pattern | None:
        pattern = self.patterns.get(pattern_id)
        if pattern is None:
            return None
        update: dict[str, object] = {
            "confidence": round(min(maximum, max(minimum, pattern.confidence + delta)), 4)
        }
        if counter:
            update[counter] = getattr(pattern, counter) + 1
        self.patterns[pattern_id] = pattern.model_copy(update=update)
        return self.patterns[pattern_id]

    async def set_confidence(self, pattern_id: str, confidence: float) -> bool:
        pattern = self.patterns.get(pattern_id)
        if pattern is None:
            return False
        self.patterns[pattern_id] = pattern.model_copy(update={"confidence": confidence})
        return True

    async def record_action(self, action: UserAction) -> None:
        self.actions.append(action)

    async def recent_actions(self, field: str, new_value: str, limit: int) -> list[UserAction]:
        matching = [a for a in self.actions if a.field == field and a.new_value == new_value]
        return list(reversed(matching))[:limit]


class FakeTrackDatabase:
    """TrackDatabase doing case-insensitive substring search over a list."""

    def __init__(self, tracks: list[LearnedTrack] | None = None) -> None:
        self.tracks = list(tracks or [])
        self.queries: list[str] = []

    async def query(self, search_term: str, limit: int) -> list[LearnedTrack]:
        self.queries.append(search_term)
        term = search_term.lower()
        found = [
            track
            for track in self.tracks
            if term in track.track_name.lower() or term in (track.catalog_code or "").lower()
        ]
        return found[:limit]

    async def upsert_track(self, track: LearnedTrack) -> None:
        self.tracks.append(track)


class FakeMetadataReader:
    """MetadataReader returning canned tags keyed by file name."""

    def __init__(self, tags: dict[str, FileMetadata]) -> None:
        self.tags = tags
        self.read_paths: list[Path] = []

    async def read(self, path: Path) -> FileMetadata | None:
        self.read_paths.append(path)
        return self.tags.get(path.name)


class FakeRemoteClassifier:
    """RemoteClassifier returning a fixed reply, or raising ``error``."""

    def __init__(self, reply: str = "[]", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.batches: list[list[str]] = []

    async def classify_batch(self, filenames: list[str]) -> str:
        self.batches.append(list(filenames))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def project_xml(
    clips: list[tuple[str, list[tuple[int, int]]]],
    media_paths: dict[str, str] | None = None,
    extra_names: list[str] | None = None,
) -> str:
    """Build a minimal project document.

    Track item placements come first and reference subclips defined later
    in the document, the way real project files are laid out.
    """
    items: list[str] = []
    definitions: list[str] = []
    for index, (name, placements) in enumerate(clips):
        subclip_id = 100 + index
        clip_id = 200 + index
        for start, end in placements:
            items.append(
                "<AudioClipTrackItem><ClipTrackItem><TrackItem>"
                f"<Start>{start}</Start><End>{end}</End>"
                f'</TrackItem><SubClip ObjectRef="{subclip_id}"/></ClipTrackItem>'
                "</AudioClipTrackItem>"
            )
        definitions.append(
            f'<SubClip ObjectID="{subclip_id}"><Clip ObjectRef="{clip_id}"/>'
            f"<Name>{escape(name)}</Name></SubClip>"
        )
        definitions.append(f'<Clip ObjectID="{clip_id}"><Name>{escape(name)}</Name></Clip>')

    for name in extra_names or []:
        definitions.append(f"<Bin><Name>{escape(name)}</Name></Bin>")

    media = [
        f"<Media><ActualMediaFilePath>{escape(path)}</ActualMediaFilePath></Media>"
        for path in (media_paths or {}).values()
    ]

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<PremiereData Version="3">'
        f"{''.join(items)}{''.join(definitions)}{''.join(media)}"
        "</PremiereData>"
    )


@pytest.fixture
def write_project(tmp_path: Path):
    """Write gzip-compressed project XML and return its path."""

    def write(xml: str, name: str = "ACME_tv30_Big Game - v3.prproj") -> Path:
        path = tmp_path / name
        with gzip.open(path, "wb") as stream:
            stream.write(xml.encode("utf-8"))
        return path

    return write


@pytest.fixture
def pattern_store() -> InMemoryPatternStore:
    return InMemoryPatternStore()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


def make_cue(
    clip_id: str,
    display_name: str,
    *,
    original_name: str | None = None,
    cue_type: CueType = CueType.MAIN,
    confidence: float = 0.9,
    library: str | None = None,
    catalog_code: str | None = None,
    ticks: int = 60 * TICKS_PER_SECOND,
) -> EnrichedCue:
    """An enriched cue as it enters the enrichment chain."""
    clip = ClassifiedClip(
        id=clip_id,
        original_name=original_name or f"{display_name}.wav",
        total_ticks=ticks,
        max_ticks=ticks,
        instance_count=1,
        cue_type=cue_type,
        confidence=confidence,
        classification_reason="test",
        base_track_name=display_name.lower(),
        display_name=display_name,
        library=library,
        catalog_code=catalog_code,
        is_low_confidence=confidence < 0.8,
    )
    timed, _ = calculate_durations([clip])
    return EnrichedCue.from_grouped(GroupedCue(**timed[0].model_dump()))
