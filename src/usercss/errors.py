"""Exception types raised inside the usercss core.

None of these escape :func:`usercss.parse`; the orchestrator converts them
into error strings on the returned :class:`~usercss.model.ParseResult`.
"""

from __future__ import annotations


class UserStyleError(Exception):
    """Base class for usercss errors."""


class MetadataError(UserStyleError):
    """Raised when a metadata block cannot be reliably located or read."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(message)
