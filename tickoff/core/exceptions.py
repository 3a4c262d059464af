"""
FILE: tickoff/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - TickoffError (base exception)
  - LoadErrorKind, LoadError
  - SaveErrorKind, SaveError
  - TaskNotFoundError
  - InvalidInputError
  - ConfigError
DEPENDENCIES:
  - enum (stdlib)
NOTES:
  - All exceptions inherit from TickoffError for easy catching
  - LoadError and SaveError are recoverable: the runtime turns them into
    LoadCompleted/SaveCompleted events instead of letting them escape
  - Store layer raises these, UI layers catch and display
"""

from enum import Enum
from typing import Optional


class TickoffError(Exception):
    """Base exception for all tickoff errors."""
    pass


class LoadErrorKind(Enum):
    NOT_FOUND = "not_found"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"


class SaveErrorKind(Enum):
    WRITE_FAILURE = "write_failure"


class LoadError(TickoffError):
    """Stored snapshot could not be read or decoded."""

    def __init__(self, kind: LoadErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        message = f"Could not load tasks ({kind.value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SaveError(TickoffError):
    """Snapshot could not be written."""

    def __init__(self, kind: SaveErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        message = f"Could not save tasks ({kind.value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class TaskNotFoundError(TickoffError):
    """No task matches the given reference (row number or id prefix)."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Task {ref} not found")


class InvalidInputError(TickoffError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class ConfigError(TickoffError):
    """Invalid configuration value."""

    def __init__(self, message: str):
        super().__init__(message)
