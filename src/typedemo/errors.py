from __future__ import annotations


class TypedemoError(Exception):
    """Base class for errors that abort a demo run."""


class ScriptError(TypedemoError, ValueError):
    """The script text cannot be turned into actions."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class EditorSetupError(TypedemoError, OSError):
    """An editor action references a file that cannot be demoed."""


class WorkingDirectoryError(TypedemoError, OSError):
    """A `cd` action points at something that is not a directory."""
