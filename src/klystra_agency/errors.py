"""Application error taxonomy.

Each error carries the HTTP status it maps to; the API layer turns them
into ``{"success": false, "message": ...}`` responses.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single violated field in a request payload."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    """Base class for errors that are safe to report to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    """Malformed or missing input; lists every violated field."""

    status_code = 400
    default_message = "Invalid data"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors)

    @property
    def fields(self) -> list[str]:
        return [error.field for error in self.errors]

    def to_dict(self) -> dict[str, object]:
        body = super().to_dict()
        body["errors"] = [error.to_dict() for error in self.errors]
        return body


class AuthenticationError(AppError):
    """Bad credentials. The message never says which part was wrong."""

    status_code = 401
    default_message = "Incorrect username or password"


class UnauthorizedError(AppError):
    """No authenticated principal on a route that needs one."""

    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    """Authenticated, but without the admin role."""

    status_code = 403
    default_message = "Forbidden - Admin access required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """A uniqueness constraint would be violated."""

    status_code = 409
    default_message = "Resource already exists"


class PayloadTooLargeError(AppError):
    status_code = 413
    default_message = "Uploaded file is too large"

    def __init__(self, max_bytes: int) -> None:
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(f"Uploaded file exceeds the {max_mb:g} MB limit")
        self.max_bytes = max_bytes


class InternalError(AppError):
    """Unexpected failure. Details belong in server logs, not in the message."""

    status_code = 500
    default_message = "Internal server error"
