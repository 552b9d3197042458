"""Password hashing for stored credentials."""

import bcrypt

from userlist.core.config import get_settings


def hash_password(plain_password: str | None, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = (plain_password or "").encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str | None, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = (plain_password or "").encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False
