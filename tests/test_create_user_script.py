"""Tests for the create_user bootstrap command."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from userlist.core.security import verify_password
from userlist.models import Base, Rights, User
from userlist.scripts import create_user


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.SessionTesting = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        patcher = patch.object(create_user, "SessionLocal", self.SessionTesting)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> int:
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            return create_user.main(list(argv))

    def test_creates_admin(self) -> None:
        self.assertEqual(self._run("admin", "s3cret", "Peter", "Kneisel", "admin"), 0)
        with self.SessionTesting() as db:
            user = db.execute(select(User).where(User.username == "admin")).scalar_one()
            self.assertEqual(user.rights, int(Rights.ADMIN))
            self.assertTrue(verify_password("s3cret", user.password))
            self.assertIsNotNone(user.creation_time)

    def test_defaults_to_standard_user(self) -> None:
        self.assertEqual(self._run("hans", "pw", "Hans", "Mustermann"), 0)
        with self.SessionTesting() as db:
            user = db.execute(select(User).where(User.username == "hans")).scalar_one()
            self.assertEqual(user.rights, int(Rights.USER))

    def test_refuses_duplicate(self) -> None:
        self.assertEqual(self._run("admin", "pw", "Peter", "Kneisel"), 0)
        self.assertEqual(self._run("admin", "pw", "Other", "Person"), 1)

    def test_refuses_blank_names(self) -> None:
        self.assertEqual(self._run("admin", "pw", " ", "Kneisel"), 1)


if __name__ == "__main__":
    unittest.main()
