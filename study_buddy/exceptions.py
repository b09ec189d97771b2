"""Domain exception hierarchy for the Study Buddy chat client."""

from __future__ import annotations


class StudyBuddyError(RuntimeError):
    """Base class for all domain-level chat errors."""


class BackendTransportError(StudyBuddyError):
    """Raised when a chat turn cannot be completed by the backend."""


class BackendConnectionError(BackendTransportError):
    """Raised when the backend host cannot be reached."""


class BackendStatusError(BackendTransportError):
    """Raised when the backend answers with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Backend returned HTTP {status_code}.")


class BackendResponseError(BackendTransportError):
    """Raised when the backend body cannot be parsed as a reply payload."""


class ConfigValidationError(StudyBuddyError):
    """Raised when configuration cannot be validated safely."""
