import asyncio
from pathlib import Path

from conftest import FakeMetadataReader, make_cue
from cue_importer.enrichment import enrich_with_metadata, separate_composer_publisher
from cue_importer.enrichment.concurrency import map_bounded
from cue_importer.enrichment.file_metadata import apply_file_metadata, read_audio_metadata
from cue_importer.enrichment.schemas import EnrichedField, FileMetadata, ProvenanceSource


def test_with_field_never_overwrites():
    """A field with content keeps its value and provenance."""
    cue = make_cue("clip-1", "Theme").with_field(
        EnrichedField.COMPOSER, "Jane Doe", ProvenanceSource.FILE_METADATA, 1.0
    )

    updated = cue.with_field(EnrichedField.COMPOSER, "Someone Else", ProvenanceSource.PATTERN, 0.9)

    assert updated.field_value(EnrichedField.COMPOSER) == "Jane Doe"
    assert updated.fields[EnrichedField.COMPOSER].source == ProvenanceSource.FILE_METADATA


def test_placeholder_values_count_as_empty():
    cue = make_cue("clip-1", "Theme").with_field(
        EnrichedField.ARTIST, "n/a", ProvenanceSource.FILENAME, 0.9
    )

    assert cue.has_field(EnrichedField.ARTIST) is False
    assert cue.with_field(EnrichedField.ARTIST, "", ProvenanceSource.PATTERN, 0.9) == cue


def test_filename_fields_seed_the_cue():
    cue = make_cue("clip-1", "Punch Drunk", library="BMG Production Music")

    assert cue.field_value(EnrichedField.LIBRARY) == "BMG Production Music"
    assert cue.fields[EnrichedField.LIBRARY].source == ProvenanceSource.FILENAME


def test_separate_composer_publisher():
    composers, publishers = separate_composer_publisher(
        ["John Smith (BMI)", "Sony Music Publishing (ASCAP)", "Jane Doe", " "]
    )

    assert composers == "John Smith (BMI), Jane Doe"
    assert publishers == "Sony Music Publishing (ASCAP)"


def test_library_artist_tag_becomes_label():
    cue = make_cue("clip-1", "Theme")
    metadata = FileMetadata(artist="BMG Production Music", album="Ka-Pow", composer="Jane Doe")

    enriched = apply_file_metadata(cue, metadata)

    assert enriched.field_value(EnrichedField.LABEL) == "BMG Production Music"
    assert enriched.has_field(EnrichedField.ARTIST) is False
    assert enriched.field_value(EnrichedField.SOURCE) == "Ka-Pow"
    assert enriched.field_value(EnrichedField.COMPOSER) == "Jane Doe"
    assert enriched.fields[EnrichedField.COMPOSER].confidence == 1.0


def test_performer_artist_tag_stays_artist():
    enriched = apply_file_metadata(make_cue("clip-1", "Theme"), FileMetadata(artist="The Band"))

    assert enriched.field_value(EnrichedField.ARTIST) == "The Band"


def test_enrich_with_metadata_reads_referenced_files(tmp_path: Path):
    media = tmp_path / "Theme.wav"
    media.write_bytes(b"")
    reader = FakeMetadataReader(
        {"Theme.wav": FileMetadata(composer="Jane Doe", publisher="Acme Music Publishing")}
    )
    cues = [make_cue("clip-1", "Theme"), make_cue("clip-2", "Missing")]

    enriched, summary = asyncio.run(
        enrich_with_metadata(cues, {"Theme.wav": str(media)}, reader)
    )

    assert enriched[0].field_value(EnrichedField.COMPOSER) == "Jane Doe"
    assert enriched[0].field_value(EnrichedField.PUBLISHER) == "Acme Music Publishing"
    assert enriched[1] == cues[1]
    assert summary.counts["enriched"] == 1
    assert summary.counts["files_not_found"] == 1
    assert reader.read_paths == [media]


def test_reader_failures_leave_cues_unchanged(tmp_path: Path):
    media = tmp_path / "Theme.wav"
    media.write_bytes(b"")

    class BrokenReader:
        async def read(self, path: Path) -> FileMetadata | None:
            raise OSError("device not ready")

    cues = [make_cue("clip-1", "Theme")]

    enriched, summary = asyncio.run(
        enrich_with_metadata(cues, {"Theme.wav": str(media)}, BrokenReader())
    )

    assert enriched == cues
    assert summary.counts["failed"] == 1


def test_missing_reader_skips_the_stage():
    cues = [make_cue("clip-1", "Theme")]

    enriched, summary = asyncio.run(enrich_with_metadata(cues, {}, None))

    assert enriched == cues
    assert summary.skipped is True
    assert summary.reason == "no metadata reader configured"


def test_unreadable_file_has_no_metadata(tmp_path: Path):
    notes = tmp_path / "notes.txt"
    notes.write_text("not an audio file")

    assert read_audio_metadata(notes) is None


def test_map_bounded_limits_concurrency_and_keeps_order():
    in_flight = 0
    peak = 0

    async def work(item: int) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01 * (5 - item))
        in_flight -= 1
        return item * 10

    results = asyncio.run(map_bounded([1, 2, 3, 4], work, concurrency=2))

    assert results == [10, 20, 30, 40]
    assert peak == 2
