"""Tests for the WebSocket broadcast relay."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import asyncio
import unittest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from userlist.main import create_app
from userlist.services.relay import BroadcastRelay, parse_frame


class TestParseFrame(unittest.TestCase):
    """Only objects with a non-empty string event are relayed."""

    def test_event_with_data(self) -> None:
        self.assertEqual(
            parse_frame({"event": "test2", "data": {"x": 1}, "extra": True}),
            {"event": "test2", "data": {"x": 1}},
        )

    def test_event_without_data(self) -> None:
        self.assertEqual(parse_frame({"event": "test4"}), {"event": "test4"})

    def test_rejects_non_objects(self) -> None:
        self.assertIsNone(parse_frame(["test2"]))
        self.assertIsNone(parse_frame("test2"))

    def test_rejects_missing_or_empty_event(self) -> None:
        self.assertIsNone(parse_frame({"data": 1}))
        self.assertIsNone(parse_frame({"event": ""}))
        self.assertIsNone(parse_frame({"event": 3}))


class TestBroadcastRelayPublish(unittest.TestCase):
    """publish skips the sender and drops receivers that fail."""

    def test_failing_receiver_is_dropped(self) -> None:
        async def scenario() -> tuple[int, int]:
            relay = BroadcastRelay()
            sender, good, bad = AsyncMock(), AsyncMock(), AsyncMock()
            bad.send_json.side_effect = RuntimeError("closed")
            for ws in (sender, good, bad):
                await relay.connect(ws)
            delivered = await relay.publish(sender, {"event": "test3", "data": 1})
            sender.send_json.assert_not_called()
            good.send_json.assert_awaited_once_with({"event": "test3", "data": 1})
            return delivered, relay.client_count

        delivered, remaining = asyncio.run(scenario())
        self.assertEqual(delivered, 1)
        self.assertEqual(remaining, 2)


class TestRelayEndpoint(unittest.TestCase):
    def test_relays_to_other_clients_only(self) -> None:
        with TestClient(create_app()) as client:
            with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
                first.send_text("not json")
                first.send_json({"event": "test2", "data": {"row": 3}})
                self.assertEqual(second.receive_json(), {"event": "test2", "data": {"row": 3}})

                second.send_json({"event": "test4"})
                # first never got its own frame: the next thing it sees is second's
                self.assertEqual(first.receive_json(), {"event": "test4"})

    def test_binary_frame_is_skipped(self) -> None:
        with TestClient(create_app()) as client:
            with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
                first.send_bytes(b'{"event": "test2"}')
                first.send_json({"event": "test3", "data": 1})
                self.assertEqual(second.receive_json(), {"event": "test3", "data": 1})


if __name__ == "__main__":
    unittest.main()
