import asyncio

from conftest import FakeTrackDatabase, make_cue
from cue_importer.enrichment import (
    calculate_similarity,
    clean_track_name,
    extract_catalog_code,
    find_best_match,
    match_learned_db,
)
from cue_importer.enrichment.learned_db import lookup_track
from cue_importer.enrichment.schemas import EnrichedField, LearnedTrack, ProvenanceSource

PUNCH_DRUNK = LearnedTrack(
    track_name="Punch Drunk",
    catalog_code="IATS021",
    composer="Jane Doe (BMI)",
    publisher="BMG Rights Management (BMI)",
)


def test_clean_track_name():
    assert clean_track_name("BYND-Fire Thunder Hit") == "fire thunder hit"
    assert clean_track_name("Punch_Drunk_STEM_Bass") == "punch drunk"
    assert clean_track_name("AMT05 Master Blaster") == "master blaster"


def test_extract_catalog_code():
    assert extract_catalog_code("iats021 Punch Drunk") == "IATS021"
    assert extract_catalog_code("Punch Drunk") is None


def test_similarity():
    assert calculate_similarity("punch drunk", "punch drunk") == 1.0
    assert calculate_similarity("a", "punch") == 0.0
    assert calculate_similarity("punch drunk", "punch drunker") > 0.8
    assert calculate_similarity("punch drunk", "quiet morning") < 0.2


def test_exact_match_beats_fuzzy():
    candidates = [LearnedTrack(track_name="Punch Drunker"), PUNCH_DRUNK]

    match = find_best_match("Punch Drunk", candidates)

    assert match is not None
    assert match.track == PUNCH_DRUNK
    assert match.confidence == 1.0


def test_catalog_code_match():
    match = find_best_match("IATS021 Something Else", [PUNCH_DRUNK])

    assert match is not None
    assert match.confidence == 0.95
    assert "IATS021" in match.reason


def test_weak_candidates_are_rejected():
    assert find_best_match("Punch Drunk", [LearnedTrack(track_name="Quiet Morning")]) is None


def test_lookup_falls_back_to_catalog_code():
    database = FakeTrackDatabase([PUNCH_DRUNK])

    match = asyncio.run(lookup_track(database, "IATS021 XY"))

    assert match is not None
    assert database.queries == ["IATS021"]


def test_match_learned_db_fills_composer_and_publisher():
    database = FakeTrackDatabase([PUNCH_DRUNK, LearnedTrack(track_name="Sunny Morning Light")])
    cues = [make_cue("clip-1", "Punch Drunk"), make_cue("clip-2", "Sunny Morning Lights")]

    matched, summary = asyncio.run(match_learned_db(cues, database))

    exact = matched[0]
    assert exact.field_value(EnrichedField.COMPOSER) == "Jane Doe (BMI)"
    assert exact.field_value(EnrichedField.PUBLISHER) == "BMG Rights Management (BMI)"
    assert exact.fields[EnrichedField.COMPOSER].source == ProvenanceSource.LEARNED_DB
    assert exact.matched_track == "Punch Drunk"
    assert exact.match_confidence == 1.0

    assert matched[1].matched_track == "Sunny Morning Light"
    assert summary.counts == {"matched": 2, "exact": 1, "fuzzy": 1, "unmatched": 0, "failed": 0}


def test_lookup_errors_are_counted_not_raised():
    class BrokenDatabase(FakeTrackDatabase):
        async def query(self, search_term: str, limit: int) -> list[LearnedTrack]:
            raise ConnectionError("database unavailable")

    cues = [make_cue("clip-1", "Punch Drunk")]

    matched, summary = asyncio.run(match_learned_db(cues, BrokenDatabase()))

    assert matched == cues
    assert summary.counts["failed"] == 1


def test_missing_database_skips_the_stage():
    cues = [make_cue("clip-1", "Punch Drunk")]

    matched, summary = asyncio.run(match_learned_db(cues, None))

    assert matched == cues
    assert summary.skipped is True


def test_catalog_code_from_classification_drives_the_lookup():
    """Recognizers strip the code from the display name, so the cue's own code is used."""
    retitled = LearnedTrack(track_name="Retitled Library Cut", catalog_code="IATS021", composer="Jane Doe")
    database = FakeTrackDatabase([retitled])
    cues = [make_cue("clip-1", "Punch Drunk", catalog_code="IATS021")]

    matched, summary = asyncio.run(match_learned_db(cues, database))

    assert database.queries == ["punch", "IATS021"]
    assert matched[0].matched_track == "Retitled Library Cut"
    assert matched[0].match_confidence == 0.95
    assert matched[0].field_value(EnrichedField.COMPOSER) == "Jane Doe"
    assert summary.counts["fuzzy"] == 1


def test_code_in_the_name_wins_over_the_known_code():
    match = find_best_match("IATS021 Something Else", [PUNCH_DRUNK], catalog_code="APM123")

    assert match is not None
    assert match.confidence == 0.95


def test_candidate_code_can_come_from_its_name():
    candidate = LearnedTrack(track_name="IATS021 Punch Drunk Full Mix")

    match = find_best_match("Left Hook", [candidate], catalog_code="iats021")

    assert match is not None
    assert match.track == candidate
    assert match.confidence == 0.95


def test_unmatched_cues_are_counted_as_ints():
    cues = [make_cue("clip-1", "Quiet Morning")]

    _, summary = asyncio.run(match_learned_db(cues, FakeTrackDatabase([PUNCH_DRUNK])))

    assert summary.counts["unmatched"] == 1
    assert summary.counts["matched"] == 0
    assert all(isinstance(count, int) for count in summary.counts.values())
