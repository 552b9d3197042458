"""ORM model for user accounts (the user list)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from userlist.models.base import Base
from userlist.models.rights import Rights


class User(Base):
    """
    User account for session login and rights-based access control.

    password holds a bcrypt digest, never the plain text. username is unique at
    the database level; duplicate inserts fail with an IntegrityError.
    """

    __tablename__ = "userlist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    creation_time = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    rights = Column(Integer, nullable=False, default=int(Rights.USER))
