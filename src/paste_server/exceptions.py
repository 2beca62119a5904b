"""Exceptions raised by the paste core.

Each class fixes the HTTP status and ``error_type`` it is reported with, so
the API layer only has to render them. ``details`` holds structured context
for logs and is never sent to clients.
"""

from enum import StrEnum
from typing import Any

from starlette import status


class ErrorType(StrEnum):
    """Values of the ``error.type`` field in error responses."""

    INVALID_REQUEST = "invalid_request_error"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type_error"
    REQUEST_TOO_LARGE = "request_too_large_error"
    AUTHENTICATION = "authentication_error"
    NOT_FOUND = "not_found_error"
    CONFLICT = "conflict_error"
    INTERNAL_SERVER = "internal_server_error"


class PasteServerError(Exception):
    """Root of every error the service reports to clients."""

    error_type: ErrorType = ErrorType.INTERNAL_SERVER
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


# Request bodies


class DecodeError(PasteServerError):
    """The request body could not be turned into a request model."""

    error_type = ErrorType.INVALID_REQUEST
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedMediaTypeError(DecodeError):
    error_type = ErrorType.UNSUPPORTED_MEDIA_TYPE
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self) -> None:
        super().__init__("Content-Type header is not application/json")


class EntityTooLargeError(DecodeError):
    error_type = ErrorType.REQUEST_TOO_LARGE
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, max_bytes: int) -> None:
        super().__init__(
            f"Request body must not be larger than {_format_size(max_bytes)}",
            max_bytes=max_bytes,
        )
        self.max_bytes = max_bytes


class EmptyBodyError(DecodeError):
    def __init__(self) -> None:
        super().__init__("Request body must not be empty")


class MalformedJSONError(DecodeError):
    """Syntax error at a byte offset into the body."""

    def __init__(self, offset: int) -> None:
        super().__init__(
            f"Request body contains badly-formed JSON (at position {offset})",
            offset=offset,
        )
        self.offset = offset


class TruncatedJSONError(DecodeError):
    """The body ends before the first JSON value does."""

    def __init__(self) -> None:
        super().__init__("Request body contains badly-formed JSON")


class InvalidFieldTypeError(DecodeError):
    """A field holds a JSON value of the wrong type.

    ``field`` is None when the body itself is not a JSON object.
    """

    def __init__(self, field: str | None, offset: int) -> None:
        if field is None:
            message = f"Request body must be a JSON object (at position {offset})"
        else:
            message = (
                f'Request body contains an invalid value for the "{field}" field '
                f"(at position {offset})"
            )
        super().__init__(message, field=field, offset=offset)
        self.field = field
        self.offset = offset


class UnknownFieldError(DecodeError):
    def __init__(self, field: str) -> None:
        super().__init__(f'Request body contains unknown field "{field}"', field=field)
        self.field = field


class MultipleObjectsError(DecodeError):
    def __init__(self) -> None:
        super().__init__("Request body must only contain a single JSON object")


# Paste lifecycle


class ValidationError(PasteServerError):
    """A decoded request asks for something the paste rules forbid."""

    error_type = ErrorType.INVALID_REQUEST
    status_code = status.HTTP_400_BAD_REQUEST


class PasteNotFoundError(PasteServerError):
    """No live paste has this id. Reported as 400 on every endpoint."""

    error_type = ErrorType.NOT_FOUND
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, paste_id: str) -> None:
        super().__init__("No document found with that id", paste_id=paste_id)
        self.paste_id = paste_id


class AuthorizationError(PasteServerError):
    error_type = ErrorType.AUTHENTICATION
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid access key") -> None:
        super().__init__(message)


# Storage


class PersistenceError(PasteServerError):
    """The store failed or did not apply a write.

    Clients only ever see the generic message; the cause is chained.
    """

    def __init__(self, message: str = "Error accessing paste storage") -> None:
        super().__init__(message)


class ConflictError(PasteServerError):
    """The paste changed between the read and the conditional write."""

    error_type = ErrorType.CONFLICT
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, paste_id: str) -> None:
        super().__init__(
            "Paste was modified by another request, retry the edit",
            paste_id=paste_id,
        )
        self.paste_id = paste_id


def _format_size(num_bytes: int) -> str:
    for unit, size in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes % size == 0:
            return f"{num_bytes // size}{unit}"
    return f"{num_bytes} bytes"


__all__ = [
    "ErrorType",
    "PasteServerError",
    "DecodeError",
    "UnsupportedMediaTypeError",
    "EntityTooLargeError",
    "EmptyBodyError",
    "MalformedJSONError",
    "TruncatedJSONError",
    "InvalidFieldTypeError",
    "UnknownFieldError",
    "MultipleObjectsError",
    "ValidationError",
    "PasteNotFoundError",
    "AuthorizationError",
    "PersistenceError",
    "ConflictError",
]
