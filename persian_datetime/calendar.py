"""Persian (Solar Hijri) calendar arithmetic.

Every other module derives Persian fields from the helpers in this module.
Days are counted as proleptic Gregorian ordinals (``date.toordinal()``) and
instants as ticks, 100 nanosecond intervals since 0001-01-01 00:00.
Leap years follow the arithmetic 33 year cycle.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Tuple, Union

from .errors import RangeError

__all__ = [
    "MAX_MONTH",
    "MAX_ORDINAL",
    "MAX_SUPPORTED_DATETIME",
    "MAX_SUPPORTED_TICKS",
    "MAX_YEAR",
    "MIN_MONTH",
    "MIN_ORDINAL",
    "MIN_SUPPORTED_DATETIME",
    "MIN_SUPPORTED_TICKS",
    "MIN_YEAR",
    "PersianDate",
    "TICKS_PER_DAY",
    "TICKS_PER_HOUR",
    "TICKS_PER_MILLISECOND",
    "TICKS_PER_MINUTE",
    "TICKS_PER_SECOND",
    "add_days",
    "add_hours",
    "add_milliseconds",
    "add_minutes",
    "add_months",
    "add_seconds",
    "add_years",
    "check_ticks",
    "coerce_gregorian",
    "coerce_persian",
    "datetime_to_ticks",
    "day_of_week",
    "day_of_year",
    "days_in_month",
    "days_in_year",
    "from_ordinal",
    "gregorian_to_persian",
    "is_leap_year",
    "persian_to_gregorian",
    "persian_to_ticks",
    "ticks_to_datetime",
    "ticks_to_ordinal",
    "to_ordinal",
]

MIN_YEAR = 1
MAX_YEAR = 9378
MIN_MONTH = 1
MAX_MONTH = 12

TICKS_PER_MILLISECOND = 10_000
TICKS_PER_SECOND = TICKS_PER_MILLISECOND * 1000
TICKS_PER_MINUTE = TICKS_PER_SECOND * 60
TICKS_PER_HOUR = TICKS_PER_MINUTE * 60
TICKS_PER_DAY = TICKS_PER_HOUR * 24

_MILLIS_PER_DAY = TICKS_PER_DAY // TICKS_PER_MILLISECOND
_MAX_MONTH_OFFSET = 120_000

_PERSIAN_MONTH_LENGTHS = [31, 31, 31, 31, 31, 31, 30, 30, 30, 30, 30, 29]
_DAYS_BEFORE_MONTH = [sum(_PERSIAN_MONTH_LENGTHS[:i]) for i in range(12)]

# 979/01/01 fell on 1600-03-20; year numbers in the cycle are offsets from it.
_CYCLE_BASE_YEAR = 979
_CYCLE_BASE_ORDINAL = date(1600, 1, 1).toordinal() + 79
_DAYS_PER_CYCLE = 33 * 365 + 8
_DAYS_PER_BLOCK = 4 * 365 + 1


@dataclass(frozen=True)
class PersianDate:
    """Immutable (year, month, day) triple in the Persian calendar."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        max_day = days_in_month(self.year, self.month)
        if not (1 <= self.day <= max_day):
            raise RangeError(f"day must be in 1..{max_day} for month {self.month}")

    def isoformat(self, sep: str = "-") -> str:
        return f"{self.year:04d}{sep}{self.month:02d}{sep}{self.day:02d}"

    def toordinal(self) -> int:
        return to_ordinal(self.year, self.month, self.day)

    def to_gregorian(self) -> date:
        return persian_to_gregorian((self.year, self.month, self.day))


def _check_year(year: int) -> None:
    if not (MIN_YEAR <= year <= MAX_YEAR):
        raise RangeError(f"year must be in {MIN_YEAR}..{MAX_YEAR}, got {year}")


def _check_month(month: int) -> None:
    if not (MIN_MONTH <= month <= MAX_MONTH):
        raise RangeError(f"month must be in {MIN_MONTH}..{MAX_MONTH}, got {month}")


def _days_before_year(year: int) -> int:
    offset = year - _CYCLE_BASE_YEAR
    return 365 * offset + offset // 33 * 8 + ((offset % 33) + 3) // 4


def is_leap_year(year: int) -> bool:
    _check_year(year)
    position = (year - _CYCLE_BASE_YEAR) % 33
    return position % 4 == 0 and position < 32


def days_in_month(year: int, month: int) -> int:
    _check_year(year)
    _check_month(month)
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if is_leap_year(year) else 29


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def to_ordinal(year: int, month: int, day: int) -> int:
    """Return the proleptic Gregorian ordinal of a Persian date."""

    max_day = days_in_month(year, month)
    if not (1 <= day <= max_day):
        raise RangeError(f"day must be in 1..{max_day} for {year}/{month:02d}")
    return (
        _CYCLE_BASE_ORDINAL
        + _days_before_year(year)
        + _DAYS_BEFORE_MONTH[month - 1]
        + day
        - 1
    )


def _split_ordinal(ordinal: int) -> Tuple[int, int]:
    """Return ``(year, zero_based_day_of_year)`` for a Gregorian ordinal."""

    days = ordinal - _CYCLE_BASE_ORDINAL
    cycle, days = divmod(days, _DAYS_PER_CYCLE)
    block, days = divmod(days, _DAYS_PER_BLOCK)
    year = _CYCLE_BASE_YEAR + 33 * cycle + 4 * block
    # the first year of every four year block is the leap one
    if days >= 366:
        year += (days - 1) // 365
        days = (days - 1) % 365
    return year, days


def from_ordinal(ordinal: int) -> PersianDate:
    year, days = _split_ordinal(ordinal)
    if days < 186:
        month = 1 + days // 31
        day = 1 + days % 31
    else:
        days -= 186
        month = 7 + days // 30
        day = 1 + days % 30
    return PersianDate(year, month, day)


def day_of_year(ordinal: int) -> int:
    return _split_ordinal(ordinal)[1] + 1


def day_of_week(ordinal: int) -> int:
    """Return the weekday of an ordinal counting Sunday as ``0``."""

    return ordinal % 7


MIN_ORDINAL = to_ordinal(MIN_YEAR, 1, 1)
MAX_ORDINAL = date.max.toordinal()

MIN_SUPPORTED_TICKS = (MIN_ORDINAL - 1) * TICKS_PER_DAY
MAX_SUPPORTED_TICKS = MAX_ORDINAL * TICKS_PER_DAY - 1
MIN_SUPPORTED_DATETIME = datetime.combine(date.fromordinal(MIN_ORDINAL), time.min)
MAX_SUPPORTED_DATETIME = datetime.max
_MAX_MILLIS = MAX_ORDINAL * _MILLIS_PER_DAY


def coerce_gregorian(value: Union[str, date, datetime, Iterable[int]]) -> Tuple[int, int, int]:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.year, value.month, value.day
    if isinstance(value, str):
        tokens = value.replace("/", "-").split("-")
        if len(tokens) != 3:
            raise ValueError(f"Unsupported Gregorian date string: {value!r}")
        return tuple(int(part) for part in tokens)  # type: ignore[return-value]
    try:
        year, month, day = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise TypeError("Expected a date, string, or iterable of three integers") from exc
    return int(year), int(month), int(day)


def coerce_persian(value: Union[str, PersianDate, Iterable[int]]) -> Tuple[int, int, int]:
    if isinstance(value, PersianDate):
        return value.year, value.month, value.day
    if isinstance(value, str):
        tokens = value.replace("/", "-").split("-")
        if len(tokens) != 3:
            raise ValueError(f"Unsupported Persian date string: {value!r}")
        return tuple(int(part) for part in tokens)  # type: ignore[return-value]
    try:
        year, month, day = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise TypeError("Expected a PersianDate, string, or iterable of three integers") from exc
    return int(year), int(month), int(day)


def gregorian_to_persian(value: Union[str, date, datetime, Iterable[int]]) -> PersianDate:
    ordinal = date(*coerce_gregorian(value)).toordinal()
    if ordinal < MIN_ORDINAL:
        raise RangeError(f"{value!r} precedes the first day of the Persian calendar")
    return from_ordinal(ordinal)


def persian_to_gregorian(value: Union[str, PersianDate, Iterable[int]]) -> date:
    ordinal = to_ordinal(*coerce_persian(value))
    if ordinal > MAX_ORDINAL:
        raise RangeError(f"{value!r} lies beyond {date.max.isoformat()}")
    return date.fromordinal(ordinal)


def check_ticks(ticks: int) -> int:
    if not (MIN_SUPPORTED_TICKS <= ticks <= MAX_SUPPORTED_TICKS):
        raise RangeError(
            f"ticks must be in {MIN_SUPPORTED_TICKS}..{MAX_SUPPORTED_TICKS}, got {ticks}"
        )
    return ticks


def datetime_to_ticks(value: datetime) -> int:
    """Return the tick count of a wall-clock ``datetime``; ``tzinfo`` is ignored."""

    seconds = value.hour * 3600 + value.minute * 60 + value.second
    return (
        (value.toordinal() - 1) * TICKS_PER_DAY
        + seconds * TICKS_PER_SECOND
        + value.microsecond * 10
    )


def ticks_to_ordinal(ticks: int) -> int:
    return ticks // TICKS_PER_DAY + 1


def ticks_to_datetime(ticks: int) -> datetime:
    """Return a naive ``datetime``; sub-microsecond ticks are truncated."""

    days, remainder = divmod(ticks, TICKS_PER_DAY)
    hour, remainder = divmod(remainder, TICKS_PER_HOUR)
    minute, remainder = divmod(remainder, TICKS_PER_MINUTE)
    second, remainder = divmod(remainder, TICKS_PER_SECOND)
    return datetime.combine(
        date.fromordinal(days + 1),
        time(hour, minute, second, remainder // 10),
    )


def persian_to_ticks(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    if not (0 <= hour < 24):
        raise RangeError(f"hour must be in 0..23, got {hour}")
    if not (0 <= minute < 60):
        raise RangeError(f"minute must be in 0..59, got {minute}")
    if not (0 <= second < 60):
        raise RangeError(f"second must be in 0..59, got {second}")
    if not (0 <= millisecond < 1000):
        raise RangeError(f"millisecond must be in 0..999, got {millisecond}")
    ticks = (to_ordinal(year, month, day) - 1) * TICKS_PER_DAY
    ticks += (hour * 3600 + minute * 60 + second) * TICKS_PER_SECOND
    ticks += millisecond * TICKS_PER_MILLISECOND
    return check_ticks(ticks)


def add_months(ticks: int, months: int) -> int:
    """Shift ``ticks`` by whole months, clamping the day to the target month."""

    if not (-_MAX_MONTH_OFFSET <= months <= _MAX_MONTH_OFFSET):
        raise RangeError(f"months must be in -{_MAX_MONTH_OFFSET}..{_MAX_MONTH_OFFSET}")
    current = from_ordinal(ticks_to_ordinal(ticks))
    index = current.month - 1 + months
    year = current.year + index // 12
    month = index % 12 + 1
    _check_year(year)
    day = min(current.day, days_in_month(year, month))
    result = (to_ordinal(year, month, day) - 1) * TICKS_PER_DAY + ticks % TICKS_PER_DAY
    return check_ticks(result)


def add_years(ticks: int, years: int) -> int:
    return add_months(ticks, years * 12)


def _add(ticks: int, value: float, scale: int) -> int:
    millis = int(value * scale + (0.5 if value >= 0 else -0.5))
    if not (-_MAX_MILLIS <= millis <= _MAX_MILLIS):
        raise RangeError(f"offset of {value!r} is out of range")
    return check_ticks(ticks + millis * TICKS_PER_MILLISECOND)


def add_milliseconds(ticks: int, milliseconds: float) -> int:
    return _add(ticks, milliseconds, 1)


def add_seconds(ticks: int, seconds: float) -> int:
    return _add(ticks, seconds, 1000)


def add_minutes(ticks: int, minutes: float) -> int:
    return _add(ticks, minutes, 60 * 1000)


def add_hours(ticks: int, hours: float) -> int:
    return _add(ticks, hours, 3600 * 1000)


def add_days(ticks: int, days: float) -> int:
    return _add(ticks, days, _MILLIS_PER_DAY)
