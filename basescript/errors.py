"""Exception types shared by the compiler and the runtime helpers."""

from __future__ import annotations


class BaseScriptError(Exception):
    """Base class for all BaseScript errors."""


class SchemaViolation(BaseScriptError):
    """A script document does not satisfy the command grammar."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class AssertionFailure(BaseScriptError, AssertionError):
    """Raised by compiled programs when an ``assert`` step fails."""


class RegistryError(BaseScriptError):
    """The compatibility registry could not be read."""
