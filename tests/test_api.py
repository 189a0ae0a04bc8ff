import pytest
from fastapi.testclient import TestClient

from conftest import TICKS_PER_SECOND, FakeTrackDatabase, InMemoryPatternStore, project_xml
from cue_importer.api import providers
from cue_importer.api.import_registry import ImportRegistry
from cue_importer.api.main import app
from cue_importer.pattern_engine import DEFAULT_PATTERNS, PatternEngine
from cue_importer.pipeline import ImportConfig

BMG_TRACK = {"id": "clip-1", "track_name": "Punch Drunk", "track_type": "main", "library": "BMG Production Music"}


@pytest.fixture
def store() -> InMemoryPatternStore:
    return InMemoryPatternStore(DEFAULT_PATTERNS)


@pytest.fixture
def client(store: InMemoryPatternStore):
    registry = ImportRegistry()
    engine = PatternEngine(store)
    app.dependency_overrides[providers.import_config] = lambda: ImportConfig()
    app.dependency_overrides[providers.import_registry] = lambda: registry
    app.dependency_overrides[providers.pattern_engine] = lambda: engine
    app.dependency_overrides[providers.track_database] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_import_runs_in_background(client: TestClient, write_project):
    """The import is queued, then completed by the background task with a result."""
    path = write_project(
        project_xml(
            [
                ("mx_BMGPM_IATS021_Punch_Drunk.wav", [(0, 20 * TICKS_PER_SECOND)]),
                ("Interview_CAM1_01.09.2026.wav", [(0, 5 * TICKS_PER_SECOND)]),
            ]
        )
    )

    created = client.post("/api/imports", json={"file_path": str(path)})
    assert created.status_code == 200
    assert created.json()["status"] == "queued"
    import_id = created.json()["import_id"]

    fetched = client.get(f"/api/imports/{import_id}")
    assert fetched.status_code == 200
    body = fetched.json()
    assert body["status"] == "completed"
    assert body["completed_at"] is not None
    assert [cue["display_name"] for cue in body["result"]["cues"]] == ["Punch Drunk"]
    assert len(body["result"]["excluded"]) == 1

    report = client.get(f"/api/imports/{import_id}/report")
    assert report.status_code == 200
    assert "Total Cues: 1" in report.text

    assert client.post(f"/api/imports/{import_id}/cancel").status_code == 400


def test_failed_import_records_error(client: TestClient, tmp_path):
    created = client.post("/api/imports", json={"file_path": str(tmp_path / "missing.prproj")})
    import_id = created.json()["import_id"]

    body = client.get(f"/api/imports/{import_id}").json()

    assert body["status"] == "failed"
    assert body["error_message"].startswith("ProjectFileNotFoundError")
    assert client.get(f"/api/imports/{import_id}/report").status_code == 409


def test_unknown_import(client: TestClient):
    assert client.get("/api/imports/nope").status_code == 404
    assert client.post("/api/imports/nope/cancel").status_code == 404


def test_empty_file_path_is_rejected(client: TestClient):
    assert client.post("/api/imports", json={"file_path": ""}).status_code == 422


def test_list_patterns(client: TestClient):
    response = client.get("/api/patterns")

    assert response.status_code == 200
    assert len(response.json()) == len(DEFAULT_PATTERNS)


def test_suggest_and_record_choice(client: TestClient, store: InMemoryPatternStore):
    choices = client.post("/api/patterns/suggestions", json={"track": BMG_TRACK, "field": "artist"}).json()
    top = choices["options"][0]
    assert top["value"] == "N/A"
    assert top["pattern_id"] == "p1"
    assert choices["requires_choice"] is True

    recorded = client.post(
        "/api/patterns/choices",
        json={"track": BMG_TRACK, "field": "artist", "chosen": top, "all_options": choices["options"]},
    )

    assert recorded.status_code == 200
    assert recorded.json() == {"status": "recorded", "pattern": None}
    assert store.patterns["p1"].confidence == 0.73
    assert len(store.actions) == 1


def test_batch_suggestions(client: TestClient):
    response = client.post(
        "/api/patterns/suggestions/batch",
        json={"tracks": [BMG_TRACK, {**BMG_TRACK, "id": "clip-2"}], "field": "artist"},
    )

    assert response.status_code == 200
    assert [group["track_count"] for group in response.json()] == [2]


def test_override_lowers_confidence(client: TestClient):
    response = client.post(
        "/api/patterns/overrides",
        json={"track": BMG_TRACK, "field": "artist", "pattern_id": "p1", "old_value": "N/A", "new_value": "The Band"},
    )

    assert response.status_code == 200
    assert response.json()["pattern"]["confidence"] == 0.6
    assert response.json()["pattern"]["times_overridden"] == 1


def test_override_of_unknown_pattern(client: TestClient):
    response = client.post(
        "/api/patterns/overrides",
        json={"track": BMG_TRACK, "field": "artist", "pattern_id": "missing"},
    )

    assert response.status_code == 404


def test_update_and_delete_pattern(client: TestClient, store: InMemoryPatternStore):
    assert client.put("/api/patterns/p2/confidence", json={"confidence": 0.95}).status_code == 200
    assert store.patterns["p2"].confidence == 0.95
    assert client.put("/api/patterns/missing/confidence", json={"confidence": 0.5}).status_code == 404

    assert client.delete("/api/patterns/p2").status_code == 200
    assert client.delete("/api/patterns/p2").status_code == 404


def test_patterns_unavailable_without_store(client: TestClient):
    app.dependency_overrides[providers.pattern_engine] = lambda: None

    assert client.get("/api/patterns").status_code == 503


def test_save_and_search_tracks(client: TestClient):
    database = FakeTrackDatabase()
    app.dependency_overrides[providers.track_database] = lambda: database

    saved = client.post("/api/tracks", json={"track_name": "Punch Drunk", "catalog_code": "IATS021"})
    assert saved.status_code == 200
    assert saved.json() == {"status": "saved", "track_name": "Punch Drunk"}

    found = client.get("/api/tracks", params={"search": "iats"})
    assert found.status_code == 200
    assert [track["track_name"] for track in found.json()] == ["Punch Drunk"]
    assert database.queries == ["iats"]


def test_tracks_unavailable_without_database(client: TestClient):
    assert client.get("/api/tracks", params={"search": "punch"}).status_code == 503
    assert client.post("/api/tracks", json={"track_name": "Punch Drunk"}).status_code == 503


def test_websocket_ping(client: TestClient):
    with client.websocket_connect("/ws/no-such-import") as websocket:
        websocket.send_text("ping")
        assert websocket.receive_text() == "pong"
