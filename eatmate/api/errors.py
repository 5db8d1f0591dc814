"""Error taxonomy for remote calls.

Controllers catch these at their boundary and turn them into a terminal
failed state; the details never reach the rendering layer.
"""

from typing import Optional


class EatMateError(Exception):
    """Base class for errors raised by the EatMate client core."""


class NetworkError(EatMateError):
    """The request could not complete (DNS, connection reset, timeout)."""


class ApiError(EatMateError):
    """The service answered with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.status}: {self.message}"


class EmptyCriteriaError(EatMateError, ValueError):
    """A query was built from criteria that cannot be submitted."""


def extract_error_message(payload: object, default: str) -> str:
    """Pull a human-readable message out of an error body.

    Handles ``{"message": ...}`` (Spoonacular) and
    ``{"error": {"message": ...}}`` (chat completions).
    """
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if payload.get("message"):
            return str(payload["message"])
    return default
