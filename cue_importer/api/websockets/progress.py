"""WebSocket handler for real-time import progress."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from cue_importer.pipeline.progress_reporter import connection_manager

router = APIRouter()


@router.websocket("/{import_id}")
async def websocket_endpoint(websocket: WebSocket, import_id: str) -> None:
    """WebSocket endpoint for real-time progress updates."""
    await connection_manager.connect(websocket, import_id)
    try:
        while True:
            # Keep connection alive, listen for client messages
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket, import_id)
