"""Persian (Solar Hijri) calendar value types."""

from .culture import DateTimeKind, DayOfWeek, PersianCultureInfo, get_culture
from .date_time import PersianDateTime
from .errors import (
    FormatError,
    InvalidConversionError,
    NullInputError,
    PersianCalendarError,
    RangeError,
)
from .formatting import DateTimeStyles
from .year_month import YearMonth

__version__ = "1.0.0"

__all__ = [
    "DateTimeKind",
    "DateTimeStyles",
    "DayOfWeek",
    "FormatError",
    "InvalidConversionError",
    "NullInputError",
    "PersianCalendarError",
    "PersianCultureInfo",
    "PersianDateTime",
    "RangeError",
    "YearMonth",
    "get_culture",
]
