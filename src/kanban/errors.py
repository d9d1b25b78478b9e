from __future__ import annotations

from typing import Optional


class BoardError(Exception):
    """
    Base class for board failures. Each subclass carries the HTTP status the
    API answers with.
    """

    status_code: int = 500
    default_message: str = "Board operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(BoardError):
    """A required field is missing or empty."""

    status_code = 400
    default_message = "Task title is required"


class NotFoundError(BoardError):
    """A referenced task does not exist; the caller's state is stale."""

    status_code = 404
    default_message = "Task not found"


class InvalidColumnError(BoardError):
    """A move referenced a column id that does not exist."""

    status_code = 400
    default_message = "Invalid column"


class PersistenceError(BoardError):
    """The durable document store failed."""

    status_code = 500
    default_message = "Persistence failure"


class PersistenceReadError(PersistenceError):
    default_message = "Failed to read board data"


class PersistenceWriteError(PersistenceError):
    default_message = "Failed to save board data"


class NetworkError(BoardError):
    """
    Client-side transport failure or non-success HTTP response.

    ``status_code`` is the response status, or None when no response arrived.
    """

    default_message = "Network request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code  # type: ignore[assignment]
