"""Import progress delivered to websocket clients."""

import logging

from fastapi import WebSocket

from cue_importer.pipeline.schemas import (
    ImportResult,
    ImportStatus,
    ProgressEvent,
    ProgressMessage,
    StatusMessage,
)

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Websocket subscribers per import, and the last message each import sent.

    A client that connects after an import started (or finished) is sent that
    last message right away, so it never waits for the next step to see where
    the import is.
    """

    def __init__(self) -> None:
        self.subscribers: dict[str, list[WebSocket]] = {}
        self.latest: dict[str, ProgressMessage] = {}

    async def connect(self, websocket: WebSocket, import_id: str) -> None:
        await websocket.accept()
        self.subscribers.setdefault(import_id, []).append(websocket)
        logger.info(
            "[ws] Client connected for import=%s (total: %d)",
            import_id,
            len(self.subscribers[import_id]),
        )

        latest = self.latest.get(import_id)
        if latest is not None:
            await self._send(websocket, import_id, latest)

    def disconnect(self, websocket: WebSocket, import_id: str) -> None:
        sockets = self.subscribers.get(import_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.subscribers.pop(import_id, None)

    async def publish(self, message: ProgressMessage) -> None:
        """Record ``message`` as the import's latest and send it to its subscribers."""
        self.latest[message.import_id] = message
        for websocket in list(self.subscribers.get(message.import_id, [])):
            await self._send(websocket, message.import_id, message)

    async def _send(self, websocket: WebSocket, import_id: str, message: ProgressMessage) -> None:
        try:
            await websocket.send_json(message.model_dump(mode="json"))
        except Exception as e:
            logger.debug("[ws] Dropping client for import=%s: %s", import_id, e)
            self.disconnect(websocket, import_id)


# Global instance
connection_manager = ConnectionManager()


class ProgressReporter:
    """Publishes one import's step events and its final status."""

    def __init__(self, import_id: str, manager: ConnectionManager | None = None) -> None:
        self.import_id = import_id
        self.manager = manager or connection_manager
        self.percent_complete = 0

    async def send_progress(self, event: ProgressEvent) -> None:
        logger.info(
            "[import=%s] PROGRESS: step=%d/%d (%s), percent=%d%%, items=%d",
            self.import_id,
            event.step_index,
            event.total_steps,
            event.step_name,
            event.percent_complete,
            event.items_processed,
        )
        self.percent_complete = event.percent_complete
        await self.manager.publish(event)

    async def send_complete(self, result: ImportResult) -> None:
        summary = result.final_summary
        await self.manager.publish(
            StatusMessage(
                import_id=self.import_id,
                status=ImportStatus.COMPLETED,
                percent_complete=100,
                message=f"Imported {summary.total_cues} cues ({len(result.excluded)} excluded)",
                summary=summary,
            )
        )

    async def send_error(self, error_message: str, status: ImportStatus = ImportStatus.FAILED) -> None:
        """Report a failed or cancelled import at the percentage it reached."""
        await self.manager.publish(
            StatusMessage(
                import_id=self.import_id,
                status=status,
                percent_complete=self.percent_complete,
                message=error_message,
            )
        )
