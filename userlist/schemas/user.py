"""Request/response schemas for user endpoints. Field names are camelCase on the wire."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    """
    Non-secret user fields: the shape of the session snapshot and of every user in a response.

    There is no password field, so a digest can never be serialized.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    username: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    creation_time: datetime = Field(alias="creationTime")
    rights: int


class UserCreateRequest(BaseModel):
    """New account. firstName and lastName are mandatory; rights cannot be chosen by the caller."""

    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    username: str | None = None
    password: str | None = None


class UserUpdateRequest(BaseModel):
    """Only the name fields are mutable through the API."""

    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    user: UserOut
    message: str


class UserListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_list: list[UserOut] = Field(alias="userList")
    message: str
