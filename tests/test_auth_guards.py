"""Unit tests for the session and rights guards in userlist.api.auth."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from userlist.api.auth import SESSION_USER_KEY, require_role, require_session
from userlist.core.errors import AuthenticationRequired, AuthorizationDenied
from userlist.models import Rights
from userlist.schemas.user import UserOut


def _snapshot(rights: Rights = Rights.USER, **kwargs: object) -> UserOut:
    """Build a session user snapshot for tests."""
    defaults = {
        "id": 7,
        "username": "hans",
        "firstName": "Hans",
        "lastName": "Mustermann",
        "creationTime": datetime(2018, 11, 4, 13, 2, 44, tzinfo=timezone.utc),
        "rights": int(rights),
    }
    defaults.update(kwargs)
    return UserOut.model_validate(defaults)


def _request(session: dict) -> MagicMock:
    request = MagicMock()
    request.session = session
    return request


class TestRequireSession(unittest.TestCase):
    """require_session passes only when the session holds a user snapshot."""

    def test_empty_session_raises_401(self) -> None:
        with self.assertRaises(AuthenticationRequired) as ctx:
            require_session(_request({}))
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.reason, "SessionExpired")

    def test_cleared_user_raises_401(self) -> None:
        with self.assertRaises(AuthenticationRequired):
            require_session(_request({SESSION_USER_KEY: None}))

    def test_returns_snapshot(self) -> None:
        stored = _snapshot().model_dump(mode="json", by_alias=True)
        user = require_session(_request({SESSION_USER_KEY: stored}))
        self.assertEqual(user.id, 7)
        self.assertEqual(user.first_name, "Hans")
        self.assertEqual(user.rights, Rights.USER)


class TestRequireRole(unittest.TestCase):
    """require_role compares rights ordinals with an at-least check."""

    def test_lower_rights_raise_403(self) -> None:
        guard = require_role(Rights.ADMIN)
        with self.assertRaises(AuthorizationDenied) as ctx:
            guard(_snapshot(Rights.USER))
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(ctx.exception.reason, "NotAuthorized")

    def test_equal_rights_pass(self) -> None:
        guard = require_role(Rights.ADMIN)
        user = _snapshot(Rights.ADMIN)
        self.assertIs(guard(user), user)

    def test_higher_rights_pass(self) -> None:
        guard = require_role(Rights.USER)
        user = _snapshot(Rights.ADMIN)
        self.assertIs(guard(user), user)

    def test_unknown_higher_ordinal_passes(self) -> None:
        guard = require_role(Rights.ADMIN)
        user = _snapshot().model_copy(update={"rights": 5})
        self.assertIs(guard(user), user)


if __name__ == "__main__":
    unittest.main()
