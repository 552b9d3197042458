"""Core app configuration, database, sessions and errors."""

from userlist.core.config import get_settings, settings
from userlist.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
