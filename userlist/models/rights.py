"""Ordinal user rights; higher values are more privileged."""

from enum import IntEnum


class Rights(IntEnum):
    """Only compared with "at least" checks, never for equality with a role name."""

    USER = 1
    ADMIN = 2
