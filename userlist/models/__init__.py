"""SQLAlchemy ORM models."""

from userlist.models.base import Base
from userlist.models.rights import Rights
from userlist.models.user import User

__all__ = ["Base", "Rights", "User"]
