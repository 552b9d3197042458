"""
Create a user (e.g. the first admin). Run from project root:
  python -m userlist.scripts.create_user USERNAME PASSWORD FIRST_NAME LAST_NAME [rights]
Example:
  python -m userlist.scripts.create_user admin your-secure-password Peter Kneisel admin
"""
import argparse
import logging
import sys
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from userlist.core.config import get_settings
from userlist.core.database import SessionLocal
from userlist.core.security import hash_password
from userlist.models import Rights, User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

RIGHTS_BY_NAME = {"user": Rights.USER, "admin": Rights.ADMIN}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a userlist account directly in the database.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password")
    parser.add_argument("first_name", help="First name")
    parser.add_argument("last_name", help="Last name")
    parser.add_argument("rights", nargs="?", default="user", choices=sorted(RIGHTS_BY_NAME))
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.first_name.strip() or not args.last_name.strip():
        print("First and last name must not be empty.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.username == username)).scalars().first()
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        rights = RIGHTS_BY_NAME[args.rights]
        db.add(
            User(
                username=username,
                password=hash_password(args.password, get_settings().BCRYPT_ROUNDS),
                first_name=args.first_name.strip(),
                last_name=args.last_name.strip(),
                creation_time=datetime.now(timezone.utc),
                rights=int(rights),
            )
        )
        db.commit()
        print(f"Created user '{username}' with rights '{rights.name.lower()}'.")
        return 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Creating user failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
