"""User store operations: each call issues one statement and maps failures to ApiError."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from userlist.core.errors import (
    ConflictOrStoreRejected,
    LoginIncorrect,
    NotFound,
    StoreUnavailable,
)
from userlist.core.resilience import retry_read
from userlist.core.security import hash_password, verify_password
from userlist.models import Rights, User
from userlist.schemas.user import UserCreateRequest, UserOut

if TYPE_CHECKING:
    from userlist.core.config import Settings

logger = logging.getLogger(__name__)
T = TypeVar("T")

LOGIN_INCORRECT_MESSAGE = "Username or password is incorrect."


def _store_unavailable(exc: SQLAlchemyError) -> StoreUnavailable:
    return StoreUnavailable(f"Database request failed: {exc}", cause=exc)


def _read(db: Session, settings: "Settings", func: Callable[[], T]) -> T:
    """Run an idempotent read with retries; roll back between attempts so the session stays usable."""

    def attempt() -> T:
        try:
            return func()
        except SQLAlchemyError:
            db.rollback()
            raise

    try:
        return retry_read(attempt, settings)
    except SQLAlchemyError as e:
        logger.exception("Store read failed")
        raise _store_unavailable(e) from e


def authenticate(
    db: Session, settings: "Settings", username: str | None, password: str | None
) -> UserOut:
    """
    Return the snapshot of the single account matching username and password.

    Zero matching accounts, or more than one, is reported as incorrect
    credentials. Raises StoreUnavailable if the lookup fails.
    """
    rows = _read(
        db,
        settings,
        lambda: db.execute(select(User).where(User.username == username)).scalars().all(),
    )
    matches = [u for u in rows if verify_password(password, u.password)]
    if len(matches) != 1:
        logger.info("Login rejected", extra={"username": username})
        raise LoginIncorrect(LOGIN_INCORRECT_MESSAGE)
    logger.info("Login succeeded", extra={"username": username, "user_id": matches[0].id})
    return UserOut.model_validate(matches[0])


def get_user(db: Session, settings: "Settings", user_id: int) -> UserOut:
    rows = _read(
        db,
        settings,
        lambda: db.execute(select(User).where(User.id == user_id)).scalars().all(),
    )
    if len(rows) != 1:
        raise NotFound("The requested user can not be found.")
    return UserOut.model_validate(rows[0])


def list_users(db: Session, settings: "Settings") -> list[UserOut]:
    rows = _read(
        db,
        settings,
        lambda: db.execute(select(User).order_by(User.id)).scalars().all(),
    )
    return [UserOut.model_validate(u) for u in rows]


def create_user(db: Session, settings: "Settings", body: UserCreateRequest) -> None:
    """
    Insert a standard user. Rights are always Rights.USER for accounts created here.

    Any store failure, duplicate username included, raises ConflictOrStoreRejected.
    Not retried.
    """
    user = User(
        username=body.username,
        password=hash_password(body.password or "", settings.BCRYPT_ROUNDS),
        first_name=body.first_name,
        last_name=body.last_name,
        creation_time=datetime.now(timezone.utc),
        rights=int(Rights.USER),
    )
    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Create user rejected by store: %s", type(e).__name__)
        raise ConflictOrStoreRejected(
            "An error occurred while creating the new user", cause=e
        ) from e
    logger.info("Created user", extra={"username": body.username})


def update_user_names(db: Session, user_id: int, first_name: str, last_name: str) -> None:
    """
    Set first and last name of an existing user. Username, password and rights stay unchanged.

    Raises NotFound (400) when no row matched, StoreUnavailable when the store failed.
    """
    try:
        result = db.execute(
            update(User)
            .where(User.id == user_id)
            .values(first_name=first_name, last_name=last_name)
        )
        affected = result.rowcount
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Update user failed")
        raise _store_unavailable(e) from e
    if affected != 1:
        raise NotFound("The user to update could not be found", status_code=400)


def delete_user(db: Session, user_id: int) -> None:
    """Delete by id. Raises NotFound (400) when no row matched, StoreUnavailable on store failure."""
    try:
        result = db.execute(delete(User).where(User.id == user_id))
        affected = result.rowcount
        if affected == 1:
            db.commit()
        else:
            db.rollback()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Delete user failed")
        raise _store_unavailable(e) from e
    if affected != 1:
        raise NotFound("The user to be deleted could not be found", status_code=400)
    logger.info("Deleted user", extra={"user_id": user_id})
