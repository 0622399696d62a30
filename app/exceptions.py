"""Domain errors raised by the routers and mapped to HTTP responses in app.main."""
from collections.abc import Iterable
from typing import Any

VALIDATION_MESSAGE = "One or more validation errors occurred."


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__(VALIDATION_MESSAGE)
        self.errors = errors

    @classmethod
    def from_pydantic(cls, errors: Iterable[dict[str, Any]]) -> "ValidationError":
        return cls(field_errors(errors))

    def body(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: int):
        super().__init__(f"Task with ID {task_id} not found")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int):
        super().__init__(f"User with ID {user_id} not found")


class EmailAlreadyExistsError(ConflictError):
    def __init__(self):
        super().__init__("User with this email already exists")


class EmailInUseError(ConflictError):
    def __init__(self):
        super().__init__("Email already in use by another user")


def field_errors(errors: Iterable[dict[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic error dicts by field name, dropping the request location prefix."""
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        grouped.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return grouped
