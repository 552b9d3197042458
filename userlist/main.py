"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from userlist.api import router
from userlist.core.config import Settings, get_settings
from userlist.core.database import SessionLocal, build_session_factory
from userlist.core.errors import register_exception_handlers
from userlist.core.sessions import InMemorySessionStore, ServerSessionMiddleware, SessionStore
from userlist.services.relay import BroadcastRelay

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session_store: SessionStore | None = None,
) -> FastAPI:
    """
    Build the app with an explicit settings object and session store (in-memory by default).

    Injected settings reach every route through the get_settings dependency, and
    the store engine is built from them. Without settings the process-wide
    configuration and engine are used.
    """
    if settings is None:
        settings = get_settings()
        session_factory = SessionLocal
    else:
        session_factory = build_session_factory(settings)
    if session_store is None:
        session_store = InMemorySessionStore(settings.SESSION_MAX_INACTIVE_SECONDS)

    app = FastAPI(
        title="Userlist API",
        version="2.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.session_factory = session_factory
    app.state.session_store = session_store
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.relay = BroadcastRelay()

    app.add_middleware(
        ServerSessionMiddleware,
        store=session_store,
        cookie_name=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_INACTIVE_SECONDS,
        same_site=settings.SESSION_COOKIE_SAMESITE,
        https_only=settings.SESSION_COOKIE_SECURE,
    )
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(router)

    # Mounted last so API paths take precedence over client files.
    if settings.CLIENT_DIR:
        client_dir = Path(settings.CLIENT_DIR)
        if client_dir.is_dir():
            app.mount("/", StaticFiles(directory=client_dir, html=True), name="client")
        else:
            logger.warning("CLIENT_DIR %s does not exist; static client not served", client_dir)

    return app


app = create_app()
