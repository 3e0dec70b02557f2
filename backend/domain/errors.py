from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure category shared by services and the HTTP layer."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
}


class WatchlistAppError(Exception):
    """Base class for expected, user-facing failures.

    Subclasses only pin ``kind``; the message is what gets returned to the
    client, so keep it short and free of internals.
    """

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class ValidationError(WatchlistAppError):
    kind = ErrorKind.VALIDATION


class AuthenticationError(WatchlistAppError):
    kind = ErrorKind.AUTHENTICATION


class AuthorizationError(WatchlistAppError):
    kind = ErrorKind.AUTHORIZATION


class NotFoundError(WatchlistAppError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(WatchlistAppError):
    kind = ErrorKind.CONFLICT
