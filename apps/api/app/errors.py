"""Application error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True, slots=True)
class Failure:
    """One request failure, rendered as ``{error, details?}``."""

    kind: ErrorKind
    error: str
    details: Any = None

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]


def unauthenticated(message: str, details: Any = None) -> Failure:
    return Failure(ErrorKind.UNAUTHENTICATED, message, details)


def forbidden(message: str = "Forbidden - Insufficient permissions") -> Failure:
    return Failure(ErrorKind.FORBIDDEN, message)


def validation_failed(details: dict[str, list[str]]) -> Failure:
    return Failure(ErrorKind.VALIDATION_FAILED, "Validation failed", details)


def not_found(message: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, message)


def internal(message: str, exc: BaseException | None = None) -> Failure:
    details = (str(exc) or type(exc).__name__) if exc is not None else None
    return Failure(ErrorKind.INTERNAL, message, details)


class ApiError(Exception):
    """Raised from dependencies that must stop a request before its handler runs."""

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(failure.error)

    @property
    def status_code(self) -> int:
        return self.failure.status_code


__all__ = [
    "ApiError",
    "ErrorKind",
    "Failure",
    "forbidden",
    "internal",
    "not_found",
    "unauthenticated",
    "validation_failed",
]
