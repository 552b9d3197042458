"""Request/response schemas for login endpoints."""

from pydantic import BaseModel, Field

from userlist.schemas.user import UserOut


class LoginRequest(BaseModel):
    """Credentials for login. Absent values are not rejected here; they just never match an account."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class LoginResponse(BaseModel):
    """Session user returned after login and by the login-state check."""

    message: str
    user: UserOut
