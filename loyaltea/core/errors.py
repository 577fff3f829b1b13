# loyaltea/core/errors.py
"""
Error kinds shared by every layer.

Services and repositories raise a single exception type, `ServiceError`,
tagged with an `ErrorKind`. The HTTP boundary translates the kind into a
status code and a public message using `STATUS_BY_KIND`; nothing else in
the app builds error responses.
"""

import logging
from enum import Enum

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    # Validation
    INVALID_EMAIL = "invalid_email"
    INVALID_PASSWORD = "invalid_password"
    INVALID_NAME = "invalid_name"
    INVALID_ID = "invalid_id"
    INVALID_PAYLOAD = "invalid_payload"

    # Authentication
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"

    # Lookup / conflict
    NOT_FOUND = "not_found"
    UNKNOWN_PROVIDER = "unknown_provider"
    EMAIL_EXISTS = "email_exists"

    # Dependencies
    HASHING_FAILED = "hashing_failed"
    TOKEN_SIGNING_FAILED = "token_signing_failed"
    STORE_UNAVAILABLE = "store_unavailable"
    SUBSCRIPTION_FAILED = "subscription_failed"


# kind -> (status code, public message)
STATUS_BY_KIND: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.INVALID_EMAIL: (status.HTTP_400_BAD_REQUEST, "Invalid email format"),
    ErrorKind.INVALID_PASSWORD: (
        status.HTTP_400_BAD_REQUEST,
        "Password must be at least 8 characters long",
    ),
    ErrorKind.INVALID_NAME: (status.HTTP_400_BAD_REQUEST, "Name cannot be empty"),
    ErrorKind.INVALID_ID: (status.HTTP_400_BAD_REQUEST, "Invalid user id"),
    ErrorKind.INVALID_PAYLOAD: (status.HTTP_400_BAD_REQUEST, "Invalid payload"),
    ErrorKind.INVALID_CREDENTIALS: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
    ErrorKind.INVALID_TOKEN: (status.HTTP_401_UNAUTHORIZED, "Invalid or expired token"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "User not found"),
    ErrorKind.UNKNOWN_PROVIDER: (status.HTTP_404_NOT_FOUND, "Unknown offer provider"),
    ErrorKind.EMAIL_EXISTS: (status.HTTP_409_CONFLICT, "Email already exists"),
    ErrorKind.HASHING_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
    ),
    ErrorKind.TOKEN_SIGNING_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Failed to generate token",
    ),
    ErrorKind.STORE_UNAVAILABLE: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
    ),
    ErrorKind.SUBSCRIPTION_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Failed to subscribe to mailing list",
    ),
}


class ServiceError(Exception):
    """
    A failed operation, identified by its kind.

    `detail` is internal context for logs; it is never sent to clients.
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind][0]

    @property
    def public_message(self) -> str:
        return STATUS_BY_KIND[self.kind][1]


def error_response(kind: ErrorKind) -> JSONResponse:
    status_code, message = STATUS_BY_KIND[kind]
    return JSONResponse(
        status_code=status_code,
        content={"error": kind.value, "detail": message},
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Translate a ServiceError into a JSON response.

    5xx kinds are logged with their internal detail; the client only sees
    the generic public message.
    """
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s (%s)",
            request.method,
            request.url.path,
            exc.kind.value,
            exc.detail or "no detail",
        )
    return error_response(exc.kind)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are reported as 400, not FastAPI's default 422."""
    return error_response(ErrorKind.INVALID_PAYLOAD)
