"""Exceptions raised by the Persian calendar value types."""
from __future__ import annotations

__all__ = [
    "FormatError",
    "InvalidConversionError",
    "NullInputError",
    "PersianCalendarError",
    "RangeError",
]


class PersianCalendarError(Exception):
    """Base class for every error raised by this package."""


class RangeError(PersianCalendarError, ValueError):
    """A year, month, encoded value or instant falls outside supported bounds."""


class FormatError(PersianCalendarError, ValueError):
    """Text does not match any recognised date grammar or format pattern."""


class NullInputError(PersianCalendarError, TypeError):
    """A required argument was ``None``."""


class InvalidConversionError(PersianCalendarError, TypeError):
    """The value cannot be represented by the requested type."""
