# src/taskpad/core/errors.py

"""
Error taxonomy.

Everything here is recoverable at the UI boundary: the console connector
catches TaskpadError and prints a message instead of exiting.
"""

from __future__ import annotations

FieldErrors = dict[str, str]


class TaskpadError(Exception):
    """Base class for all expected, user-facing failures."""


class ValidationError(TaskpadError):
    """One or more fields failed validation; `errors` maps field -> message."""

    def __init__(self, errors: FieldErrors) -> None:
        self.errors: FieldErrors = dict(errors)
        super().__init__("; ".join(self.errors.values()) or "Invalid input")


class EmptyText(ValidationError):
    def __init__(self, message: str = "Please enter a task!") -> None:
        super().__init__({"text": message})


class DuplicateEmail(TaskpadError):
    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("An account with this email already exists")


class InvalidCredentials(TaskpadError):
    # Same message for unknown email and wrong password.
    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class StorageFailure(TaskpadError):
    """The durable key-value store could not be read or written."""

    def __init__(self, operation: str, key: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.key = key
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Storage {operation} failed for key {key!r}{detail}")
