import asyncio
import json

from conftest import FakeRemoteClassifier, make_cue
from cue_importer.agents.cue_classifier_agent import build_classification_prompt
from cue_importer.categorizer.schemas import CueType
from cue_importer.enrichment import classify_low_confidence, parse_classifier_response, strip_code_fences
from cue_importer.enrichment.schemas import EnrichedField, ProvenanceSource

REPLY = [
    {
        "index": 1,
        "classification": "music",
        "displayName": "Sunny Morning Light",
        "library": "Artlist",
        "confidence": 0.9,
        "reasoning": "Song title with no effect keywords",
    },
    {"index": 2, "classification": "non_music", "confidence": 0.95, "reasoning": "Field recorder file"},
    {"index": 7, "classification": "sfx", "reasoning": "Out of range"},
]


def _cues():
    return [
        make_cue("clip-1", "Sunny Morning", confidence=0.6),
        make_cue("clip-2", "Zoom 0001", original_name="Zoom_0001.wav", confidence=0.5),
        make_cue("clip-3", "Punch Drunk", confidence=0.9),
    ]


def test_strip_code_fences():
    assert strip_code_fences('```json\n[{"index": 1}]\n```') == '[{"index": 1}]'
    assert strip_code_fences("[]") == "[]"


def test_parse_reply_uses_display_name_alias():
    results = parse_classifier_response(json.dumps(REPLY))

    assert results[0].display_name == "Sunny Morning Light"
    assert results[2].confidence is None


def test_low_confidence_cues_are_reclassified():
    """Only uncertain cues are sent, and non-music answers move to the excluded list."""
    classifier = FakeRemoteClassifier(f"```json\n{json.dumps(REPLY)}\n```")

    kept, excluded, summary = asyncio.run(classify_low_confidence(_cues(), classifier, enabled=True))

    assert classifier.batches == [["Sunny Morning.wav", "Zoom_0001.wav"]]
    assert [cue.id for cue in kept] == ["clip-1", "clip-3"]
    assert [cue.id for cue in excluded] == ["clip-2"]
    assert excluded[0].cue_type == CueType.EXCLUDED

    music = kept[0]
    assert music.cue_type == CueType.MAIN
    assert music.display_name == "Sunny Morning Light"
    assert music.remote_classified is True
    assert music.field_value(EnrichedField.LIBRARY) == "Artlist"
    assert music.fields[EnrichedField.LIBRARY].source == ProvenanceSource.REMOTE_CLASSIFIER
    assert kept[1].remote_classified is False
    assert summary.counts["classified"] == 2
    assert summary.counts["excluded"] == 1


def test_undecodable_reply_changes_nothing():
    cues = _cues()

    kept, excluded, summary = asyncio.run(
        classify_low_confidence(cues, FakeRemoteClassifier("I think these are songs"), enabled=True)
    )

    assert kept == cues
    assert excluded == []
    assert summary.skipped is True
    assert summary.reason == "Could not decode remote classifier reply"
    assert summary.counts["failed"] == 1


def test_classifier_errors_change_nothing():
    cues = _cues()
    classifier = FakeRemoteClassifier(error=TimeoutError("no reply"))

    kept, _, summary = asyncio.run(classify_low_confidence(cues, classifier, enabled=True))

    assert kept == cues
    assert summary.reason.startswith("Remote classifier failed")


def test_disabled_classifier_is_not_called():
    classifier = FakeRemoteClassifier()

    _, _, summary = asyncio.run(classify_low_confidence(_cues(), classifier, enabled=False))

    assert classifier.batches == []
    assert summary.reason == "Remote classifier not enabled"


def test_no_uncertain_cues_skips_the_call():
    classifier = FakeRemoteClassifier()
    cues = [make_cue("clip-1", "Punch Drunk", confidence=0.9)]

    _, _, summary = asyncio.run(classify_low_confidence(cues, classifier, enabled=True))

    assert classifier.batches == []
    assert summary.reason == "No low-confidence clips"


def test_prompt_numbers_filenames():
    prompt = build_classification_prompt(["Sunny Morning.wav", "Zoom_0001.wav"])

    assert '1. "Sunny Morning.wav"' in prompt
    assert '2. "Zoom_0001.wav"' in prompt
