"""Health check: answers while the process is up, reporting store reachability."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from userlist.core.config import Settings, get_settings
from userlist.core.database import check_db_connected, get_db
from userlist.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Always 200; an unreachable store shows up as database="disconnected"."""
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        relay_clients=request.app.state.relay.client_count,
    )
