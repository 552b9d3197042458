"""Database engine and session management."""

from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from userlist.core.config import Settings, settings


def _connect_args(cfg: Settings) -> dict[str, Any]:
    """Driver-level timeouts so a hung store call cannot hang a request forever."""
    if cfg.DATABASE_URL.startswith("sqlite"):
        return {"timeout": cfg.DB_CONNECT_TIMEOUT_SEC}
    args: dict[str, Any] = {"connect_timeout": cfg.DB_CONNECT_TIMEOUT_SEC}
    if cfg.DB_STATEMENT_TIMEOUT_MS:
        args["options"] = f"-c statement_timeout={cfg.DB_STATEMENT_TIMEOUT_MS}"
    return args


def build_engine(cfg: Settings) -> Engine:
    """Create the engine for cfg.DATABASE_URL with pool and statement timeouts."""
    kwargs: dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": cfg.DEBUG,
        "connect_args": _connect_args(cfg),
    }
    if not cfg.DATABASE_URL.startswith("sqlite"):
        kwargs["pool_timeout"] = cfg.DB_POOL_TIMEOUT_SEC
    return create_engine(cfg.DATABASE_URL, **kwargs)


def build_session_factory(cfg: Settings) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=build_engine(cfg))


# Used by the CLI and by an app built without explicit settings
engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a session from the app's session factory and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
