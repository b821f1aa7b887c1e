"""Conversion endpoints for desk clients, whitelisted when running under Frappe."""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from .. import calendar
from ..culture import get_culture, normalize_digits
from ..date_time import PersianDateTime
from ..errors import NullInputError
from ..year_month import YearMonth
from .preferences import _maybe_whitelist, resolve_format

__all__ = [
    "format_datetime",
    "format_month",
    "get_name_tables",
    "gregorian_to_persian",
    "month_range",
    "parse_datetime",
    "persian_to_gregorian",
]


def _coerce_datetime(value: Union[str, date, datetime]) -> PersianDateTime:
    if value is None:
        raise NullInputError("value is required")
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    return PersianDateTime.from_datetime(value)


def _coerce_month(value: Union[int, str, YearMonth]) -> YearMonth:
    if isinstance(value, YearMonth):
        return value
    if isinstance(value, int):
        return YearMonth(value)
    return YearMonth.parse(value)


def format_datetime(
    value: Union[str, date, datetime],
    fmt: Optional[str] = None,
    user: Optional[str] = None,
) -> str:
    """Render a Gregorian ISO timestamp as Persian text."""

    pattern = fmt or resolve_format("datetime", user).value
    return _coerce_datetime(value).to_string(pattern)


def parse_datetime(text: str, fmt: Optional[str] = None) -> str:
    """Read Persian text and return the Gregorian ISO timestamp."""

    if fmt:
        parsed = PersianDateTime.parse_exact(text, fmt)
    else:
        parsed = PersianDateTime.parse(text)
    return parsed.to_datetime().isoformat()


def format_month(
    value: Union[int, str, YearMonth],
    fmt: Optional[str] = None,
    user: Optional[str] = None,
) -> str:
    pattern = fmt or resolve_format("month", user).value
    return _coerce_month(value).to_string(pattern)


def _describe(month: YearMonth, pattern: str) -> Dict[str, object]:
    return {
        "value": month.value,
        "label": month.to_string(pattern),
        "days": month.days,
        "start_date": month.start_date.date().isoformat(),
        "end_date": month.end_date.date().isoformat(),
    }


def month_range(
    start: Union[int, str],
    end: Optional[Union[int, str]] = None,
    count: Optional[int] = None,
    user: Optional[str] = None,
) -> List[Dict[str, object]]:
    """Describe consecutive months, either ``count`` of them or up to ``end``."""

    first = _coerce_month(start)
    if end is not None:
        months = YearMonth.range(first, _coerce_month(end))
    elif count is not None:
        months = YearMonth.range_count(first, int(count))
    else:
        raise ValueError("either end or count is required")
    pattern = resolve_format("month", user).value
    return [_describe(month, pattern) for month in months]


def gregorian_to_persian(value: Union[str, date, datetime]) -> str:
    """Convert ``"2024-03-20"`` (or a ``date``) to ``"1403/01/01"``."""

    if value is None:
        raise NullInputError("value is required")
    return calendar.gregorian_to_persian(value).isoformat("/")


def persian_to_gregorian(value: str) -> str:
    """Convert ``"1403/01/01"`` or ``"1403-01-01"`` to ``"2024-03-20"``."""

    if value is None:
        raise NullInputError("value is required")
    return calendar.persian_to_gregorian(normalize_digits(value)).isoformat()


def get_name_tables() -> Dict[str, object]:
    return get_culture().date_time_format.as_dict()


format_datetime = _maybe_whitelist(format_datetime)
parse_datetime = _maybe_whitelist(parse_datetime)
format_month = _maybe_whitelist(format_month)
month_range = _maybe_whitelist(month_range)
gregorian_to_persian = _maybe_whitelist(gregorian_to_persian)
persian_to_gregorian = _maybe_whitelist(persian_to_gregorian)
get_name_tables = _maybe_whitelist(get_name_tables)
