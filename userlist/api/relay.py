"""WebSocket endpoint relaying client events to all other connected clients."""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from userlist.services.relay import BroadcastRelay, parse_frame

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def relay_socket(websocket: WebSocket) -> None:
    """Receive {"event", "data"} frames and forward each one unchanged to the other clients."""
    relay: BroadcastRelay = websocket.app.state.relay
    await relay.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            frame = None
            if text is not None:
                try:
                    frame = parse_frame(json.loads(text))
                except json.JSONDecodeError:
                    pass
            if frame is None:
                logger.warning("Ignoring malformed relay frame")
                continue
            await relay.publish(websocket, frame)
    except WebSocketDisconnect:
        pass
    finally:
        await relay.disconnect(websocket)
