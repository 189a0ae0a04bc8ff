import asyncio

from conftest import TICKS_PER_SECOND, project_xml
from cue_importer.pipeline import ImportConfig, ImportRunner
from cue_importer.pipeline.progress_reporter import ConnectionManager, ProgressReporter
from cue_importer.pipeline.schemas import FinalSummary, ImportResult, ImportStatus, ProgressEvent


class FakeWebSocket:
    def __init__(self, fail: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data: dict) -> None:
        if self.fail:
            raise ConnectionResetError("client went away")
        self.sent.append(data)


def _event(step_index: int, percent: int) -> ProgressEvent:
    return ProgressEvent(
        import_id="import-7",
        step_index=step_index,
        step_name="Categorizing",
        description="Classifying clips as Main/SFX/Stem...",
        percent_complete=percent,
        completed=True,
    )


def test_progress_is_published_to_subscribers():
    manager = ConnectionManager()
    websocket = FakeWebSocket()
    reporter = ProgressReporter("import-7", manager)

    async def scenario() -> None:
        await manager.connect(websocket, "import-7")
        await reporter.send_progress(_event(2, 25))

    asyncio.run(scenario())

    assert websocket.accepted is True
    assert websocket.sent[0]["kind"] == "progress"
    assert websocket.sent[0]["percent_complete"] == 25


def test_late_subscriber_gets_the_latest_message():
    manager = ConnectionManager()
    reporter = ProgressReporter("import-7", manager)
    late = FakeWebSocket()

    async def scenario() -> None:
        await reporter.send_progress(_event(1, 0))
        await reporter.send_progress(_event(2, 25))
        await manager.connect(late, "import-7")

    asyncio.run(scenario())

    assert [message["step_index"] for message in late.sent] == [2]


def test_failing_clients_are_dropped():
    manager = ConnectionManager()
    reporter = ProgressReporter("import-7", manager)

    async def scenario() -> None:
        await manager.connect(FakeWebSocket(fail=True), "import-7")
        await reporter.send_progress(_event(2, 25))

    asyncio.run(scenario())

    assert manager.subscribers == {}


def test_errors_report_the_percent_reached():
    manager = ConnectionManager()
    websocket = FakeWebSocket()
    reporter = ProgressReporter("import-7", manager)

    async def scenario() -> None:
        await manager.connect(websocket, "import-7")
        await reporter.send_progress(_event(3, 38))
        await reporter.send_error("Import cancelled", status=ImportStatus.CANCELLED)

    asyncio.run(scenario())

    final = websocket.sent[-1]
    assert final["kind"] == "status"
    assert final["status"] == "cancelled"
    assert final["percent_complete"] == 38
    assert final["summary"] is None


def test_completion_carries_the_final_summary():
    manager = ConnectionManager()
    websocket = FakeWebSocket()
    reporter = ProgressReporter("import-7", manager)
    result = ImportResult(
        import_id="import-7",
        project_name="ACME_tv30_Big Game - v3",
        spot_title="Big Game",
        file_path="/projects/big-game.prproj",
        final_summary=FinalSummary(project_name="ACME_tv30_Big Game - v3", total_cues=3, main_cues=2),
    )

    async def scenario() -> None:
        await manager.connect(websocket, "import-7")
        await reporter.send_complete(result)

    asyncio.run(scenario())

    final = websocket.sent[-1]
    assert final["status"] == "completed"
    assert final["message"] == "Imported 3 cues (0 excluded)"
    assert final["summary"]["main_cues"] == 2


def test_runner_publishes_through_its_reporter(write_project):
    manager = ConnectionManager()
    path = write_project(project_xml([("Sunny Morning.wav", [(0, 40 * TICKS_PER_SECOND)])]))
    runner = ImportRunner("import-8", ImportConfig(), reporter=ProgressReporter("import-8", manager))

    asyncio.run(runner.run(path))

    latest = manager.latest["import-8"]
    assert latest.status == ImportStatus.COMPLETED
    assert latest.summary.total_cues == 1
