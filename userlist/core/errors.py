"""Application errors and their JSON rendering.

Every failure a route can produce is one of the ApiError subclasses below.
Handlers registered by register_exception_handlers render them as
``{"message": ..., "reason": ...}``. ``reason`` is stable and meant for client
branching; several failures share the 400 status, so clients should branch on
``reason`` rather than on the status code alone.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

MANDATORY_FIELDS_MESSAGE = "Not all mandatory fields are filled in"
INVALID_PARAMETERS_MESSAGE = "Invalid request parameters"
# Wire names of the fields the create and update user bodies require
MANDATORY_BODY_FIELDS = frozenset({"firstName", "lastName"})


class ApiError(Exception):
    """Base error carrying an HTTP status, a stable reason and a human message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = "InternalError"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "reason": self.reason}


class AuthenticationRequired(ApiError):
    """No session or the session holds no authenticated user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "SessionExpired"


class LoginIncorrect(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "LoginIncorrect"


class AuthorizationDenied(ApiError):
    """Session user's rights are below the route's minimum."""

    status_code = status.HTTP_403_FORBIDDEN
    reason = "NotAuthorized"


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    reason = "ValidationFailed"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "NotFound"


class ConflictOrStoreRejected(ApiError):
    """Store rejected a write (duplicate username, constraint, ...); cause not distinguished."""

    status_code = status.HTTP_400_BAD_REQUEST
    reason = "ConflictOrStoreRejected"


class StoreUnavailable(ApiError):
    """Connectivity, timeout or driver failure while talking to the store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason = "StoreUnavailable"


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "reason": exc.reason, "status": exc.status_code},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _is_mandatory_field_error(err: dict) -> bool:
    loc = tuple(err.get("loc", ()))
    if not loc or loc[0] != "body":
        return False
    if len(loc) == 1:
        return err.get("type") == "missing"
    return loc[1] in MANDATORY_BODY_FIELDS


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    mandatory = any(_is_mandatory_field_error(err) for err in exc.errors())
    message = MANDATORY_FIELDS_MESSAGE if mandatory else INVALID_PARAMETERS_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationFailed(message).to_dict(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render ApiError and request validation failures as JSON message bodies."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
