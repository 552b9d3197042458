"""Pydantic request/response schemas."""

from userlist.schemas.auth import LoginRequest, LoginResponse
from userlist.schemas.health import HealthResponse
from userlist.schemas.user import (
    MessageResponse,
    UserCreateRequest,
    UserListResponse,
    UserOut,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "UserCreateRequest",
    "UserListResponse",
    "UserOut",
    "UserResponse",
    "UserUpdateRequest",
]
