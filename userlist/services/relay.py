"""Broadcast relay: forward an event from one WebSocket client to every other connected client."""

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class BroadcastRelay:
    """Best-effort fan-out. A receiver that fails to accept a frame is dropped; the sender is unaffected."""

    def __init__(self) -> None:
        self._clients: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: WebSocket) -> None:
        # Registered under the lock taken before accept, so no publish can miss an accepted client.
        async with self._lock:
            await websocket.accept()
            self._clients.add(websocket)
        logger.info("Relay client connected", extra={"clients": len(self._clients)})

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._clients.discard(websocket)
        logger.info("Relay client disconnected", extra={"clients": len(self._clients)})

    async def publish(self, sender: WebSocket, frame: dict[str, Any]) -> int:
        """Send frame to every client except sender; returns how many received it."""
        async with self._lock:
            receivers = [ws for ws in self._clients if ws is not sender]
        delivered = 0
        failed: list[WebSocket] = []
        for ws in receivers:
            try:
                await ws.send_json(frame)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping relay client after send failure: %s", e)
                failed.append(ws)
        if failed:
            async with self._lock:
                self._clients.difference_update(failed)
        return delivered


def parse_frame(message: Any) -> dict[str, Any] | None:
    """Accept only JSON objects with a string "event"; "data" is optional and opaque."""
    if not isinstance(message, dict):
        return None
    event = message.get("event")
    if not isinstance(event, str) or not event:
        return None
    frame: dict[str, Any] = {"event": event}
    if "data" in message:
        frame["data"] = message["data"]
    return frame
