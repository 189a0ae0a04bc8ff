import asyncio
import json
from pathlib import Path

import pytest

from conftest import (
    TICKS_PER_SECOND,
    FakeMetadataReader,
    FakeRemoteClassifier,
    FakeTrackDatabase,
    InMemoryPatternStore,
    project_xml,
)
from cue_importer.categorizer.schemas import CueType
from cue_importer.enrichment.schemas import EnrichedField, FileMetadata, LearnedTrack, ProvenanceSource
from cue_importer.pattern_engine import DEFAULT_PATTERNS, PatternEngine
from cue_importer.pattern_engine.schemas import Pattern, PatternAction, PatternType
from cue_importer.pipeline import (
    PIPELINE_STEPS,
    ImportCancelledError,
    ImportConfig,
    ImportRunner,
    step_percent,
    summarize,
)
from cue_importer.project_parser import ProjectFileNotFoundError

LABEL_PATTERN = Pattern(
    pattern_type=PatternType.LIBRARY_DEFAULT,
    condition={"library_contains": "BMG"},
    action=PatternAction(field="label", value="BMG Production Music"),
    confidence=0.9,
)


@pytest.fixture
def spot_project(write_project, tmp_path: Path) -> Path:
    sunny_media = tmp_path / "Sunny Morning.wav"
    sunny_media.write_bytes(b"")
    xml = project_xml(
        [
            (
                "mx_BMGPM_IATS021_Punch_Drunk.wav",
                [(0, 10 * TICKS_PER_SECOND), (0, 20 * TICKS_PER_SECOND)],
            ),
            ("BASS_mx_BMGPM_IATS021_Punch_Drunk_STEM_BASS.wav", [(0, 45 * TICKS_PER_SECOND)]),
            ("Interview_CAM1_01.09.2026.wav", [(0, 90 * TICKS_PER_SECOND)]),
            ("CPSFX_door.wav", [(0, TICKS_PER_SECOND)]),
            ("Big_Whoosh_03.wav", [(0, 2 * TICKS_PER_SECOND)]),
            ("Sunny Morning.wav", [(0, 40 * TICKS_PER_SECOND)]),
        ],
        media_paths={"Sunny Morning.wav": str(sunny_media)},
    )
    return write_project(xml)


def _runner(events: list, **overrides) -> ImportRunner:
    reply = json.dumps([{"index": 1, "classification": "music", "library": "Artlist", "confidence": 0.8}])
    collaborators = {
        "metadata_reader": FakeMetadataReader({"Sunny Morning.wav": FileMetadata(composer="Jane Roe")}),
        "track_database": FakeTrackDatabase(
            [LearnedTrack(track_name="Punch Drunk", composer="Jane Doe", publisher="BMG Rights Management")]
        ),
        "pattern_engine": PatternEngine(InMemoryPatternStore([*DEFAULT_PATTERNS, LABEL_PATTERN])),
        "remote_classifier": FakeRemoteClassifier(reply),
    }
    collaborators.update(overrides)
    return ImportRunner(
        "import-1",
        ImportConfig(remote_classifier_enabled=True),
        progress_callback=events.append,
        **collaborators,
    )


def test_full_import(spot_project: Path):
    """A project goes through all eight steps into enriched, grouped cues."""
    events: list = []

    result = asyncio.run(_runner(events).run(spot_project))

    assert result.project_name == "ACME_tv30_Big Game - v3"
    assert result.spot_title == "Big Game"
    assert [cue.display_name for cue in result.cues] == ["Punch Drunk", "Big Whoosh 03", "Sunny Morning"]
    assert [cue.original_name for cue in result.excluded] == ["Interview_CAM1_01.09.2026.wav"]
    assert all(cue.cue_type != CueType.STEM for cue in result.cues)

    punch_drunk, whoosh, sunny = result.cues
    assert [stem.stem_part for stem in punch_drunk.stems] == ["BASS"]
    assert punch_drunk.formatted_duration == "0:45:00"
    assert punch_drunk.field_value(EnrichedField.COMPOSER) == "Jane Doe"
    assert punch_drunk.fields[EnrichedField.COMPOSER].source == ProvenanceSource.LEARNED_DB
    assert punch_drunk.field_value(EnrichedField.LABEL) == "BMG Production Music"
    assert punch_drunk.fields[EnrichedField.LABEL].source == ProvenanceSource.PATTERN
    assert punch_drunk.field_value(EnrichedField.USE) == "BI"

    assert whoosh.cue_type == CueType.SFX
    assert whoosh.formatted_duration == "0:02:00"

    assert sunny.field_value(EnrichedField.COMPOSER) == "Jane Roe"
    assert sunny.remote_classified is True
    assert sunny.field_value(EnrichedField.LIBRARY) == "Artlist"

    assert result.final_summary.total_cues == 3
    assert result.final_summary.main_cues == 2
    assert result.final_summary.sfx_cues == 1
    assert result.final_summary.with_composer == 2
    assert [summary.step_name for summary in result.summaries] == [
        *(step.name for step in PIPELINE_STEPS[:7]),
        "Remote Classification",
        PIPELINE_STEPS[7].name,
    ]


def test_progress_events(spot_project: Path):
    events: list = []

    asyncio.run(_runner(events).run(spot_project))

    assert len(events) == 16
    assert [(e.step_index, e.completed) for e in events[:2]] == [(1, False), (1, True)]
    assert events[0].percent_complete == 0
    assert events[-1].percent_complete == 100
    assert [e.percent_complete for e in events] == [
        step_percent(e.step_index, e.completed) for e in events
    ]
    percents = [e.percent_complete for e in events]
    assert percents == sorted(percents)
    assert events[2].step_name == "Categorizing"
    assert events[2].description == "Classifying clips as Main/SFX/Stem..."


def test_step_percent():
    assert step_percent(1, completed=False) == 0
    assert step_percent(4, completed=True) == 50
    assert step_percent(8, completed=True) == 100


def test_async_progress_callback(spot_project: Path):
    seen: list = []

    async def callback(event) -> None:
        seen.append(event.step_index)

    runner = _runner([])
    runner.progress_callback = callback

    asyncio.run(runner.run(spot_project))

    assert seen[0] == 1
    assert seen[-1] == 8


def test_cancellation_stops_at_next_step(spot_project: Path):
    events: list = []
    runner = _runner(events)

    def cancel_after_categorizing(event) -> None:
        events.append(event)
        if event.step_index == 2 and event.completed:
            runner.cancel()

    runner.progress_callback = cancel_after_categorizing

    with pytest.raises(ImportCancelledError):
        asyncio.run(runner.run(spot_project))

    assert events[-1].step_index == 2


def test_missing_collaborators_are_reported_as_skipped(spot_project: Path):
    events: list = []
    runner = _runner(events, track_database=None, pattern_engine=None, remote_classifier=None)

    result = asyncio.run(runner.run(spot_project))

    skipped = {summary.step_name: summary.reason for summary in result.summaries if summary.skipped}
    assert skipped == {
        "Matching Database": "no track database configured",
        "Applying Patterns": "no pattern store configured",
        "Remote Classification": "Remote classifier not enabled",
    }
    report = summarize(result)
    assert "IMPORT PIPELINE SUMMARY: ACME_tv30_Big Game - v3" in report
    assert "Skipped: no track database configured" in report
    assert "Total Cues: 3" in report


def test_missing_project_file_raises(tmp_path: Path):
    runner = ImportRunner("import-2", ImportConfig())

    with pytest.raises(ProjectFileNotFoundError):
        asyncio.run(runner.run(tmp_path / "missing.prproj"))
