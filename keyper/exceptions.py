"""Exceptions raised by the Keyper flows.

Every exception carries a machine-readable ``code`` and the HTTP status it
maps to. The application renders them as the error envelope; see
:func:`keyper.factory.render_error`.
"""

from typing import Optional

from fastapi import status


class KeyperError(RuntimeError):
    """Base class for failures that are reported to the caller."""

    code = 'INTERNAL_ERROR'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: Optional[str] = None,
                 status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(KeyperError):
    """Malformed input."""

    code = 'VALIDATION_FAILED'
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(KeyperError):
    """A uniqueness constraint would be violated."""

    code = 'CONFLICT'
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(KeyperError):
    """A client, user or token does not exist."""

    code = 'NOT_FOUND'
    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(KeyperError):
    """Bad credentials, API key or token."""

    code = 'UNAUTHORIZED'
    status_code = status.HTTP_401_UNAUTHORIZED


class ResourceExhaustedError(KeyperError):
    """Could not issue a unique identifier within the retry cap."""

    code = 'RESOURCE_EXHAUSTED'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DependencyError(KeyperError):
    """The document store is unreachable or failed."""

    code = 'DATABASE_ERROR'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
