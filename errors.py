# errors.py
"""
Error taxonomy for the tunnel settings editor.

Every error carries a human-readable `reason` that shells show verbatim
(message box, console line). Validation errors are returned by the pure
validators and raised by the helpers that build records from them; storage
and structure errors are always raised.
"""

from __future__ import annotations

from typing import Optional


class ConfigEditError(Exception):
    """Base class for every error the editor core reports."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(ConfigEditError):
    """A user-supplied value was rejected before any state was touched."""


class MissingField(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"{field} cannot be empty.")
        self.field = field


class NonNumericPort(ValidationError):
    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} must be a whole number (got {value!r}).")
        self.field = field
        self.value = value


class NonNumericSetting(ValidationError):
    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} must be a whole number (got {value!r}).")
        self.field = field
        self.value = value


# ---------------------------------------------------------------------------
# Collection / document structure
# ---------------------------------------------------------------------------


class OutOfRange(ConfigEditError):
    def __init__(self, position: int, size: int) -> None:
        super().__init__(f"Tunnel position {position} is out of range (have {size}).")
        self.position = position
        self.size = size


class StructuralError(ConfigEditError):
    """The host document does not have the shape the editor needs."""


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class StorageIOError(ConfigEditError):
    """Reading, backing up or writing the document failed.

    The underlying OSError is chained as __cause__.
    """

    def __init__(self, reason: str, path: Optional[str] = None) -> None:
        super().__init__(reason)
        self.path = path


class BackupRequired(ConfigEditError):
    """A commit was attempted before this session's backup succeeded."""
