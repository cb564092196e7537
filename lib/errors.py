"""
Standardized error handling for the sheet client.

Two channels:
- ApiResponse failures (bad_request / not_found / conflict / sheet_error)
  for expected, recoverable outcomes of mutating calls.
- Exceptions for call failures; only the backend-reported ones below are
  turned into ApiResponse failures by the client.
"""
from enum import Enum

from lib.common import ng
from lib.types import ApiResponse


class ErrorCode(str, Enum):
    """Standardized error codes carried on failed responses."""
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    SHEET_ERROR = "SHEET_ERROR"


class BackendRejectedError(Exception):
    """The backend refused a write (validation, quota, permission)."""


class WriteConflictError(BackendRejectedError):
    """The conditional write found a different current value."""

    def __init__(self, field: str, expected: str, actual: str) -> None:
        super().__init__(
            f"conflict on '{field}': expected '{expected}', found '{actual}'"
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class MalformedResponseError(Exception):
    """The backend returned data the row model cannot use."""


def bad_request(message: str) -> ApiResponse:
    """Create a BAD_REQUEST error response."""
    return ng(ErrorCode.BAD_REQUEST.value, message)


def not_found(message: str) -> ApiResponse:
    """Create a NOT_FOUND error response."""
    return ng(ErrorCode.NOT_FOUND.value, message)


def conflict(message: str) -> ApiResponse:
    """Create a CONFLICT error response."""
    return ng(ErrorCode.CONFLICT.value, message)


def sheet_error(message: str) -> ApiResponse:
    """Create a SHEET_ERROR error response."""
    return ng(ErrorCode.SHEET_ERROR.value, message)
