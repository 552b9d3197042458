"""Unit tests for settings validation."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import unittest

from pydantic import ValidationError

from userlist.core.config import Settings


class TestSettingsValidation(unittest.TestCase):
    def test_accepts_postgres_and_sqlite(self) -> None:
        self.assertTrue(
            Settings(DATABASE_URL=" postgresql://u:p@db:5432/userlist ").DATABASE_URL.startswith("postgresql://")
        )
        self.assertEqual(Settings(DATABASE_URL="sqlite://").DATABASE_URL, "sqlite://")

    def test_rejects_other_databases(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://root@localhost/userlist")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(BCRYPT_ROUNDS=3)
        with self.assertRaises(ValidationError):
            Settings(BCRYPT_ROUNDS=17)

    def test_session_timeout_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(SESSION_MAX_INACTIVE_SECONDS=10)

    def test_read_retries_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DB_READ_RETRIES=-1)

    def test_blank_client_dir_is_none(self) -> None:
        self.assertIsNone(Settings(CLIENT_DIR="  ").CLIENT_DIR)


if __name__ == "__main__":
    unittest.main()
