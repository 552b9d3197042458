"""Bounded retry for idempotent store reads."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

if TYPE_CHECKING:
    from userlist.core.config import Settings

logger = logging.getLogger(__name__)
T = TypeVar("T")


def is_transient(exc: BaseException) -> bool:
    """True for connection drops, timeouts and other errors worth retrying a read for."""
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def retry_read(func: Callable[[], T], settings: "Settings") -> T:
    """
    Run an idempotent read, retrying transient store errors with exponential backoff.

    Only reads go through here; writes are executed once so a retry can never
    duplicate their effect. The last error is re-raised unchanged.
    """
    retrying = Retrying(
        stop=stop_after_attempt(settings.DB_READ_RETRIES + 1),
        wait=wait_exponential(multiplier=settings.DB_RETRY_BACKOFF_SEC, max=5),
        retry=retry_if_exception(is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(func)
