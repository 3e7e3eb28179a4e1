"""Exception hierarchy for implementor table parsing, validation, and delivery.

The built-in table and both delivery branches cannot fail. The errors below
surface from the parsing surface that reads rustdoc ``implementors`` scripts
and from misuse of the one-shot loader.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ImplementorIndexError",
    "TableFormatError",
    "MalformedTableError",
    "AlreadyDeliveredError",
]


class ImplementorIndexError(RuntimeError):
    """Base exception for implementor table failures."""


class TableFormatError(ImplementorIndexError):
    """Raised when an implementors script or record cannot be decoded."""

    def __init__(self, message: str, *, line: Optional[int] = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class MalformedTableError(ImplementorIndexError):
    """Raised when a group mapping has empty names or empty descriptor lists."""


class AlreadyDeliveredError(ImplementorIndexError):
    """Raised when a loader that already delivered its table is run again."""
