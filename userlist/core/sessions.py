"""Server-side sessions: pluggable store and the ASGI middleware that binds it to requests.

The cookie only carries an opaque session id. Session data lives in a
SessionStore; the baseline InMemorySessionStore keeps it in process memory
and forgets entries after a period of inactivity (and on restart). Any object
with the same get/set/delete methods can replace it without touching routes.

Handlers read and write ``request.session`` (a plain dict) exactly as with
Starlette's cookie-based SessionMiddleware.
"""

import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 32
PURGE_INTERVAL_SECONDS = 60.0


class SessionStore(Protocol):
    """Get/set/delete session data by opaque id."""

    def get(self, session_id: str) -> dict[str, Any] | None: ...

    def set(self, session_id: str, data: dict[str, Any]) -> None: ...

    def delete(self, session_id: str) -> None: ...


@dataclass
class _Entry:
    data: dict[str, Any]
    expires_at: float


class InMemorySessionStore:
    """
    Process-local session map with an inactivity timeout; safe across worker threads.

    Expired entries are dropped when their id is looked up, and at most every
    purge_interval_seconds a write sweeps out all of them, so sessions of
    clients that never come back do not accumulate.
    """

    def __init__(
        self,
        max_inactive_seconds: int,
        clock: Callable[[], float] = time.monotonic,
        purge_interval_seconds: float = PURGE_INTERVAL_SECONDS,
    ) -> None:
        self.max_inactive_seconds = max_inactive_seconds
        self.purge_interval_seconds = purge_interval_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._next_purge = clock() + purge_interval_seconds

    def get(self, session_id: str) -> dict[str, Any] | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.expires_at <= now:
                del self._entries[session_id]
                logger.debug("Session expired after inactivity")
                return None
            entry.expires_at = now + self.max_inactive_seconds
            return dict(entry.data)

    def set(self, session_id: str, data: dict[str, Any]) -> None:
        now = self._clock()
        with self._lock:
            if now >= self._next_purge:
                removed = self._drop_expired(now)
                self._next_purge = now + self.purge_interval_seconds
                if removed:
                    logger.debug("Purged %d expired sessions", removed)
            self._entries[session_id] = _Entry(
                data=dict(data),
                expires_at=now + self.max_inactive_seconds,
            )

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        with self._lock:
            return self._drop_expired(now)

    def _drop_expired(self, now: float) -> int:
        expired = [sid for sid, e in self._entries.items() if e.expires_at <= now]
        for sid in expired:
            del self._entries[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def new_session_id() -> str:
    return secrets.token_urlsafe(SESSION_ID_BYTES)


class ServerSessionMiddleware:
    """
    Load the session for the request's cookie into ``scope["session"]`` and persist it afterwards.

    A session is created (new id, cookie issued) the first time a response
    goes out with non-empty session data for a client that has none. A session
    emptied by the handler is deleted from the store and its cookie expired.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: SessionStore,
        cookie_name: str = "userlist.sid",
        max_age: int = 3600,
        same_site: str = "lax",
        https_only: bool = False,
        path: str = "/",
    ) -> None:
        self.app = app
        self.store = store
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.path = path
        self.security_flags = f"httponly; samesite={same_site}"
        if https_only:
            self.security_flags += "; secure"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        session_id = connection.cookies.get(self.cookie_name)
        stored = self.store.get(session_id) if session_id else None
        scope["session"] = stored if stored is not None else {}

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                self._commit(scope["session"], session_id, stored is not None, message)
            await send(message)

        await self.app(scope, receive, send_wrapper)

    def _commit(
        self,
        session: dict[str, Any],
        session_id: str | None,
        existed: bool,
        message: Message,
    ) -> None:
        headers = MutableHeaders(scope=message)
        if session:
            if not existed or session_id is None:
                session_id = new_session_id()
                logger.debug("Created session")
            self.store.set(session_id, session)
            headers.append("Set-Cookie", self._cookie(session_id, self.max_age))
        elif existed and session_id is not None:
            self.store.delete(session_id)
            headers.append("Set-Cookie", self._cookie("null", 0, expired=True))

    def _cookie(self, value: str, max_age: int, expired: bool = False) -> str:
        cookie = f"{self.cookie_name}={value}; path={self.path}; Max-Age={max_age}; "
        if expired:
            cookie += "expires=Thu, 01 Jan 1970 00:00:00 GMT; "
        return cookie + self.security_flags
