from cue_importer.mongodb.schemas import LearnedTrackDocument, PatternDocument
from cue_importer.mongodb.schemas.documents import pattern_natural_key
from cue_importer.pattern_engine.schemas import Pattern, PatternAction, PatternType

LABEL_ACTION = PatternAction(field="label", value="BMG Production Music")


def test_natural_key_ignores_condition_order():
    first = pattern_natural_key(
        PatternType.LIBRARY_DEFAULT, {"library_contains": "BMG", "track_type": "main"}, LABEL_ACTION
    )
    second = pattern_natural_key(
        PatternType.LIBRARY_DEFAULT, {"track_type": "main", "library_contains": "BMG"}, LABEL_ACTION
    )

    assert first == second
    assert first != pattern_natural_key(
        PatternType.LIBRARY_DEFAULT, {"library_contains": "APM"}, LABEL_ACTION
    )


def test_pattern_document_conversion():
    pattern = Pattern(
        pattern_type=PatternType.LIBRARY_DEFAULT,
        condition={"library_contains": "BMG"},
        action=LABEL_ACTION,
        confidence=0.9,
        times_confirmed=2,
    )

    document = PatternDocument.from_pattern(pattern)
    restored = document.to_pattern()

    assert document.id is None
    assert restored.id is None
    assert restored.condition == pattern.condition
    assert restored.action == LABEL_ACTION
    assert restored.confidence == 0.9
    assert restored.times_confirmed == 2


def test_stored_confidence_is_clamped_on_read():
    document = PatternDocument.from_pattern(
        Pattern(pattern_type=PatternType.LIBRARY_DEFAULT, action=LABEL_ACTION, confidence=0.5)
    ).model_copy(update={"confidence": 1.4})

    assert document.to_pattern().confidence == 1.0


def test_learned_track_document_drops_storage_fields():
    document = LearnedTrackDocument(
        normalized_name="punch drunk",
        catalog_code="IATS021",
        track_name="Punch Drunk",
        composer="Jane Doe",
        times_used=3,
    )

    track = document.to_track()

    assert track.track_name == "Punch Drunk"
    assert track.catalog_code == "IATS021"
    assert track.composer == "Jane Doe"
