"""Name tables and format conventions of the ``fa-IR`` culture."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from types import ModuleType
from typing import Tuple

from . import calendar

__all__ = [
    "DateTimeFormatInfo",
    "DateTimeKind",
    "DayOfWeek",
    "PersianCultureInfo",
    "get_culture",
    "normalize_digits",
    "to_persian_digits",
]


class DayOfWeek(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


class DateTimeKind(IntEnum):
    """Whether an instant is local time, UTC, or neither."""

    UNSPECIFIED = 0
    UTC = 1
    LOCAL = 2


DAY_NAMES = ("یکشنبه", "دوشنبه", "سه شنبه", "چهارشنبه", "پنج شنبه", "جمعه", "شنبه")
SHORTEST_DAY_NAMES = ("ی", "د", "س", "چ", "پ", "ج", "ش")
MONTH_NAMES = (
    "فروردین",
    "اردیبهشت",
    "خرداد",
    "تیر",
    "مرداد",
    "شهریور",
    "مهر",
    "آبان",
    "آذر",
    "دی",
    "بهمن",
    "اسفند",
    "",
)

_TO_ASCII_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")
_TO_PERSIAN_DIGITS = str.maketrans("0123456789", "۰۱۲۳۴۵۶۷۸۹")


def normalize_digits(text: str) -> str:
    """Replace Persian and Arabic-Indic digits with ASCII ones."""

    return text.translate(_TO_ASCII_DIGITS)


def to_persian_digits(text: str) -> str:
    return text.translate(_TO_PERSIAN_DIGITS)


@dataclass(frozen=True)
class DateTimeFormatInfo:
    """Culture tables consumed by the formatters and parsers.

    Day tables are indexed by :class:`DayOfWeek` (Sunday first). Month tables
    carry a thirteenth empty entry so they line up with calendars that have
    thirteen months.
    """

    day_names: Tuple[str, ...] = DAY_NAMES
    abbreviated_day_names: Tuple[str, ...] = DAY_NAMES
    shortest_day_names: Tuple[str, ...] = SHORTEST_DAY_NAMES
    month_names: Tuple[str, ...] = MONTH_NAMES
    month_genitive_names: Tuple[str, ...] = MONTH_NAMES
    abbreviated_month_names: Tuple[str, ...] = MONTH_NAMES
    abbreviated_month_genitive_names: Tuple[str, ...] = MONTH_NAMES
    first_day_of_week: DayOfWeek = DayOfWeek.SATURDAY
    am_designator: str = "ق.ظ"
    pm_designator: str = "ب.ظ"
    date_separator: str = "/"
    time_separator: str = ":"
    era_name: str = "ه.ش"
    short_date_pattern: str = "yyyy/MM/dd"
    long_date_pattern: str = "dddd، d MMMM، yyyy"
    short_time_pattern: str = "HH:mm"
    long_time_pattern: str = "HH:mm:ss"
    full_date_time_pattern: str = "dddd، d MMMM، yyyy - HH:mm:ss"
    month_day_pattern: str = "d MMMM"
    year_month_pattern: str = "MMMM، yyyy"
    two_digit_year_max: int = 1410

    def get_day_name(self, day: int) -> str:
        return self.day_names[day]

    def get_month_name(self, month: int) -> str:
        return self.month_names[month - 1]

    def as_dict(self) -> dict:
        return {
            "day_names": list(self.day_names),
            "shortest_day_names": list(self.shortest_day_names),
            "month_names": list(self.month_names[:12]),
            "first_day_of_week": int(self.first_day_of_week),
            "am_designator": self.am_designator,
            "pm_designator": self.pm_designator,
        }


@dataclass(frozen=True)
class PersianCultureInfo:
    name: str = "fa-IR"
    date_time_format: DateTimeFormatInfo = DateTimeFormatInfo()

    @property
    def calendar(self) -> ModuleType:
        return calendar


@lru_cache(maxsize=None)
def get_culture() -> PersianCultureInfo:
    """Return the process-wide culture instance, built on first use."""

    return PersianCultureInfo()
