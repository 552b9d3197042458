"""Session login/logout and the guard dependencies (require_session, require_role)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from userlist.core.config import Settings, get_settings
from userlist.core.database import get_db
from userlist.core.errors import AuthenticationRequired, AuthorizationDenied
from userlist.models import Rights
from userlist.schemas.auth import LoginRequest, LoginResponse
from userlist.schemas.user import MessageResponse, UserOut
from userlist.services import users as user_service

router = APIRouter()

SESSION_USER_KEY = "user"


def require_session(request: Request) -> UserOut:
    """Dependency: return the session's user snapshot. Raises 401 SessionExpired without one."""
    data = request.session.get(SESSION_USER_KEY)
    if not data:
        raise AuthenticationRequired("Session expired, please log in again")
    return UserOut.model_validate(data)


def require_role(minimum: Rights) -> Callable[[UserOut], UserOut]:
    """
    Dependency factory: require a session user whose rights are at least ``minimum``.

    Builds on require_session, so an anonymous request gets 401 before rights
    are ever compared; a lower-ranked user gets 403 NotAuthorized.
    """

    def guard(current_user: Annotated[UserOut, Depends(require_session)]) -> UserOut:
        if current_user.rights < minimum:
            raise AuthorizationDenied("You are not allowed to execute this action")
        return current_user

    return guard


require_admin = require_role(Rights.ADMIN)


@router.get("/login", response_model=LoginResponse)
def get_login(
    current_user: Annotated[UserOut, Depends(require_session)],
) -> LoginResponse:
    """Report the logged-in user of the current session."""
    return LoginResponse(message="User still logged in", user=current_user)


@router.post("/login", response_model=LoginResponse)
def login(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    body: LoginRequest | None = None,
) -> LoginResponse:
    """
    Authenticate with username and password and store the user in the session.

    The session keeps a copy of the user taken now; later changes to the
    account are not reflected until the next login.
    """
    body = body or LoginRequest()
    user = user_service.authenticate(db, settings, body.username, body.password)
    request.session[SESSION_USER_KEY] = user.model_dump(mode="json", by_alias=True)
    return LoginResponse(message="Successfully logged in", user=user)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> MessageResponse:
    """Drop the user from the session. Succeeds whether or not anyone was logged in."""
    request.session.pop(SESSION_USER_KEY, None)
    return MessageResponse(message="Successfully logged out")
