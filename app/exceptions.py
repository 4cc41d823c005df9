"""Application error taxonomy.

Services raise these; ``main.py`` renders them as ``{"error": ..., "detail": ...}``
with the matching status code.
"""

from http import HTTPStatus


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.error, "detail": self.message}


class ValidationFailedError(AppError):
    status_code = HTTPStatus.BAD_REQUEST
    error = "validation_error"
    message = "Invalid input"


class AuthenticationError(AppError):
    status_code = HTTPStatus.UNAUTHORIZED
    error = "unauthenticated"
    message = "Not authenticated"


class NotFoundError(AppError):
    status_code = HTTPStatus.NOT_FOUND
    error = "not_found"
    message = "Resource not found"


class TaskNotFoundError(NotFoundError):
    message = "Task not found"


class ConflictError(AppError):
    status_code = HTTPStatus.CONFLICT
    error = "conflict"
    message = "Resource already exists"


class EmailAlreadyRegisteredError(ConflictError):
    message = "Email already registered"
