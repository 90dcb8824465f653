"""
espwatch Exceptions
====================

Error types raised by the espwatch library. The CLI is the only place
that turns them into a process exit.
"""

from __future__ import annotations

from typing import Optional


class EspwatchError(Exception):
    """Base class for all espwatch errors."""


class PrefixTableError(EspwatchError, ValueError):
    """Raised when the vendor prefix reference data is malformed.

    Attributes:
        line_number: 1-based row of the offending record.
        record: The offending record text.
    """

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        record: Optional[str] = None,
    ) -> None:
        self.line_number = line_number
        self.record = record
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class CaptureOpenError(EspwatchError, OSError):
    """Raised when a capture trace cannot be opened or recognised."""
