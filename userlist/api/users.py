"""User CRUD endpoints. Reads need a session; writes need an admin session."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from userlist.api.auth import require_admin, require_session
from userlist.core.config import Settings, get_settings
from userlist.core.database import get_db
from userlist.schemas.user import (
    MessageResponse,
    UserCreateRequest,
    UserListResponse,
    UserOut,
    UserResponse,
    UserUpdateRequest,
)
from userlist.services import users as user_service

router = APIRouter()

# Ids are 32-bit serials starting at 1; anything outside is rejected before the store is asked.
MAX_USER_ID = 2**31 - 1
UserId = Annotated[int, Path(ge=1, le=MAX_USER_ID)]


@router.post(
    "/user",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_user(
    body: UserCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Create a standard user (rights are always USER; callers cannot elevate)."""
    user_service.create_user(db, settings, body)
    return MessageResponse(message="Successfully created new user")


@router.get(
    "/user/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(require_session)],
)
def get_user(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    user = user_service.get_user(db, settings, user_id)
    return UserResponse(user=user, message="Successfully got user")


@router.put(
    "/user/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def update_user(
    user_id: UserId,
    body: UserUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Update first and last name. Unknown id is a 400 NotFound, never a silent success."""
    user_service.update_user_names(db, user_id, body.first_name, body.last_name)
    return MessageResponse(
        message=f"Successfully updated user {body.first_name} {body.last_name}"
    )


@router.delete(
    "/user/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_user(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    user_service.delete_user(db, user_id)
    return MessageResponse(message="Successfully deleted user")


@router.get("/users", response_model=UserListResponse)
def list_users(
    _user: Annotated[UserOut, Depends(require_session)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserListResponse:
    """List every user, ordered by id."""
    users = user_service.list_users(db, settings)
    return UserListResponse(user_list=users, message="Successfully requested user list")
