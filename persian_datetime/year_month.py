"""A Persian calendar month, stored as the single integer ``year * 100 + month``."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from functools import total_ordering
from typing import Any, Callable, Iterator, Mapping, Optional, Tuple, Union

from . import calendar
from .culture import MONTH_NAMES, normalize_digits
from .errors import FormatError, InvalidConversionError, NullInputError, RangeError
from .logs import get_logger

__all__ = [
    "MAX_ENCODED_VALUE",
    "MIN_ENCODED_VALUE",
    "MonthRange",
    "YearMonth",
]

logger = get_logger(__name__)

VALUE_FIELD = "_value"
STANDARD_FORMAT = "yyyymm"
DEFAULT_FORMAT = "yyyy/mm"

MIN_ENCODED_VALUE = calendar.MIN_YEAR * 100 + calendar.MIN_MONTH
MAX_ENCODED_VALUE = calendar.MAX_YEAR * 100 + calendar.MAX_MONTH

_DIGITS = re.compile(r"[0-9]+\Z")
_SEPARATORS = ("/", "\\", " ")


def _encode(year: int, month: int) -> int:
    """Normalise an out of range month into the year and return the encoded value."""

    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    value = year * 100 + month
    if not (MIN_ENCODED_VALUE <= value <= MAX_ENCODED_VALUE):
        raise RangeError(f"{year}/{month:02d} is outside the supported months")
    return value


def _validate(year: int, month: int) -> int:
    if not (calendar.MIN_YEAR <= year <= calendar.MAX_YEAR):
        raise RangeError(f"year must be in {calendar.MIN_YEAR}..{calendar.MAX_YEAR}, got {year}")
    if not (calendar.MIN_MONTH <= month <= calendar.MAX_MONTH):
        raise RangeError(f"month must be in {calendar.MIN_MONTH}..{calendar.MAX_MONTH}, got {month}")
    return year * 100 + month


@total_ordering
@dataclass(frozen=True, init=False, eq=False, repr=False)
class YearMonth:
    """Immutable Persian (year, month) pair.

    ``YearMonth(1403, 7)`` builds a month from its parts, ``YearMonth(140307)``
    from an encoded value and ``YearMonth(some_date)`` from a Gregorian
    ``date``/``datetime`` or a :class:`~persian_datetime.PersianDateTime`.
    ``YearMonth()`` is the zero value, which behaves exactly like
    :attr:`MIN_VALUE`.
    """

    _value: int

    MIN_VALUE = None  # type: YearMonth
    MAX_VALUE = None  # type: YearMonth

    def __init__(self, *args: Any) -> None:
        if not args:
            value = 0
        elif len(args) == 2:
            year, month = args
            if year is None or month is None:
                raise NullInputError("year and month are required")
            value = _validate(int(year), int(month))
        elif len(args) == 1:
            value = self._coerce(args[0])
        else:
            raise TypeError(f"YearMonth() takes at most 2 arguments ({len(args)} given)")
        object.__setattr__(self, "_value", value)

    @staticmethod
    def _coerce(source: Any) -> int:
        if source is None:
            raise NullInputError("a value is required")
        if isinstance(source, YearMonth):
            return source.value
        if isinstance(source, bool):
            raise InvalidConversionError("a boolean is not a month")
        if isinstance(source, int):
            if not (MIN_ENCODED_VALUE <= source <= MAX_ENCODED_VALUE):
                raise RangeError(f"encoded value must be in {MIN_ENCODED_VALUE}..{MAX_ENCODED_VALUE}")
            return _validate(source // 100, source % 100)
        if isinstance(source, (date, datetime)):
            if not isinstance(source, datetime):
                source = datetime.combine(source, time.min)
            if not (calendar.MIN_SUPPORTED_DATETIME <= source.replace(tzinfo=None)):
                raise RangeError(f"{source!r} precedes the first day of the Persian calendar")
            persian = calendar.gregorian_to_persian(source)
            return _validate(persian.year, persian.month)
        ticks = getattr(source, "ticks", None)
        if isinstance(ticks, int):
            persian = calendar.from_ordinal(calendar.ticks_to_ordinal(ticks))
            return _validate(persian.year, persian.month)
        raise TypeError(f"cannot build a YearMonth from {type(source).__name__}")

    @classmethod
    def from_value_unchecked(cls, value: int) -> "YearMonth":
        """Wrap an encoded value without validating it."""

        month = cls.__new__(cls)
        object.__setattr__(month, "_value", value)
        return month

    @classmethod
    def now(cls) -> "YearMonth":
        return cls(datetime.now())

    # Properties -----------------------------------------------------------

    @property
    def value(self) -> int:
        if self._value == 0:
            return MIN_ENCODED_VALUE
        return self._value

    @property
    def year(self) -> int:
        return self.value // 100

    @property
    def month(self) -> int:
        return self.value % 100

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def days(self) -> int:
        return calendar.days_in_month(self.year, self.month)

    @property
    def start_date(self) -> datetime:
        """Gregorian midnight of the first day of the month."""

        first = calendar.PersianDate(self.year, self.month, 1).to_gregorian()
        return datetime.combine(first, time.min)

    @property
    def end_date(self) -> datetime:
        """Gregorian midnight of the last day of the month."""

        last = calendar.PersianDate(self.year, self.month, self.days).to_gregorian()
        return datetime.combine(last, time.min)

    # Arithmetic -----------------------------------------------------------

    def add_months(self, months: int) -> "YearMonth":
        return YearMonth.from_value_unchecked(_encode(self.year, self.month + months))

    def add_years(self, years: int) -> "YearMonth":
        return YearMonth.from_value_unchecked(_encode(self.year + years, self.month))

    def next_month(self) -> "YearMonth":
        return self.add_months(1)

    def previous_month(self) -> "YearMonth":
        return self.add_months(-1)

    def next_year(self) -> "YearMonth":
        return self.add_months(12)

    def previous_year(self) -> "YearMonth":
        return self.add_months(-12)

    def year_first_month(self) -> "YearMonth":
        return YearMonth(self.year, 1)

    def year_last_month(self) -> "YearMonth":
        return YearMonth(self.year, 12)

    def is_leap_month(self) -> bool:
        return self.month == 12 and calendar.is_leap_year(self.year)

    @staticmethod
    def get_month_name(month: int) -> str:
        if not (calendar.MIN_MONTH <= month <= calendar.MAX_MONTH):
            raise RangeError(f"month must be in {calendar.MIN_MONTH}..{calendar.MAX_MONTH}, got {month}")
        return MONTH_NAMES[month - 1]

    # Formatting -----------------------------------------------------------

    def to_string(self, pattern: Optional[str] = None) -> str:
        """Render the month with ``y``/``Y`` and ``m``/``M`` tokens.

        ``y``/``yy`` print ``year % 100`` padded to the run length, longer runs
        print the full year padded to the run length. ``m``/``mm`` print the
        month number, three or more ``m`` print the month name. Every other
        character is copied as is.
        """

        if pattern is None:
            pattern = DEFAULT_FORMAT
        result = []
        index = 0
        length = len(pattern)
        while index < length:
            ch = pattern[index]
            end = index + 1
            while end < length and pattern[end] == ch:
                end += 1
            run = end - index
            if ch in "mM":
                if run <= 2:
                    result.append(f"{self.month:0{run}d}")
                else:
                    result.append(self.name)
            elif ch in "yY":
                if run <= 2:
                    result.append(f"{self.year % 100:0{run}d}")
                else:
                    result.append(f"{self.year:0{run}d}")
            else:
                result.append(ch)
                run = 1
            index += run
        return "".join(result)

    def __str__(self) -> str:
        return self.to_string(DEFAULT_FORMAT)

    def __repr__(self) -> str:
        return f"YearMonth({self.year}, {self.month})"

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec) if format_spec else str(self)

    # Parsing --------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        """Parse ``"140307"``, ``"1403/07"``, ``"1403\\07"``, ``"1403 07"`` or ``"140307"``.

        Raises :class:`FormatError` when neither the encoded nor the long form
        matches and :class:`RangeError` when the form matches but the month
        does not exist.
        """

        if text is None:
            raise NullInputError("text is required")
        text = normalize_digits(text).strip()
        if _DIGITS.match(text):
            return cls(int(text))
        length = len(text)
        if 3 <= length <= 7:
            index = length - 2
            month_text = text[index:]
            if _DIGITS.match(month_text):
                if text[index - 1] in _SEPARATORS:
                    index -= 1
                year_text = text[:index]
                if _DIGITS.match(year_text):
                    return cls(int(year_text), int(month_text))
        raise FormatError(f"cannot parse {text!r} as a Persian month")

    @classmethod
    def try_parse(cls, text: Optional[str]) -> Tuple[bool, "YearMonth"]:
        """Return ``(True, month)`` on success and ``(False, MIN_VALUE)`` otherwise."""

        if not text:
            return False, cls.MIN_VALUE
        try:
            return True, cls.parse(text)
        except (FormatError, RangeError) as exc:
            logger.debug("rejected month %r: %s", text, exc)
            return False, cls.MIN_VALUE

    # Sequences ------------------------------------------------------------

    @staticmethod
    def range(start: Union[int, "YearMonth"], end: Union[int, "YearMonth"]) -> "MonthRange":
        """Every month from ``start`` to ``end`` inclusive; empty when ``start > end``.

        Both bounds accept a :class:`YearMonth` or an encoded value, so
        ``YearMonth.range(140001, 140003)`` covers three months.
        """

        return MonthRange(_months_between, YearMonth(start), YearMonth(end))

    @staticmethod
    def range_count(start: Union[int, "YearMonth"], count: int) -> "MonthRange":
        """``count`` consecutive months beginning at ``start``."""

        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError("count must be an integer")
        if count < 0:
            raise RangeError(f"count must not be negative, got {count}")
        return MonthRange(_months_from, YearMonth(start), count)

    # Comparison -----------------------------------------------------------

    @staticmethod
    def compare(first: "YearMonth", second: "YearMonth") -> int:
        if first.value > second.value:
            return 1
        if first.value < second.value:
            return -1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: "YearMonth") -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self.value < other.value

    def __hash__(self) -> int:
        return self.value

    # Operators ------------------------------------------------------------

    def __add__(self, months: int) -> "YearMonth":
        if isinstance(months, bool) or not isinstance(months, int):
            return NotImplemented
        return self.add_months(months)

    __radd__ = __add__

    def __sub__(self, other: Union[int, "YearMonth"]) -> Union[int, "YearMonth"]:
        if isinstance(other, YearMonth):
            return self.value - other.value
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return self.add_months(-other)

    # Conversions ----------------------------------------------------------

    def __int__(self) -> int:
        return self.value

    __index__ = __int__

    def __float__(self) -> float:
        return float(self.value)

    def convert(self, target: type) -> Any:
        """Convert to ``int``, ``float``, ``Decimal``, ``str`` or ``datetime``."""

        if target is bool:
            raise InvalidConversionError("a month cannot be converted to bool")
        if target is int:
            return self.value
        if target is float:
            return float(self.value)
        if target is Decimal:
            return Decimal(self.value)
        if target is str:
            return self.to_string(STANDARD_FORMAT)
        if target is datetime:
            return self.start_date
        if target is date:
            return self.start_date.date()
        raise InvalidConversionError(f"a month cannot be converted to {target.__name__}")

    def copy(self) -> "YearMonth":
        return YearMonth.from_value_unchecked(self._value)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "YearMonth":
        return self.copy()

    def serialize(self) -> dict:
        return {VALUE_FIELD: self._value}

    @classmethod
    def deserialize(cls, data: Mapping[str, Any]) -> "YearMonth":
        if data is None:
            raise NullInputError("data is required")
        if VALUE_FIELD not in data:
            raise FormatError("invalid serialization data")
        return cls.from_value_unchecked(int(data[VALUE_FIELD]))

    def __reduce__(self):
        return (YearMonth.from_value_unchecked, (self._value,))


class MonthRange:
    """A lazy, re-iterable run of consecutive months.

    Every ``iter()`` starts a fresh walk, so one range can be consumed any
    number of times and from independent call sites.
    """

    __slots__ = ("_walk", "_start", "_stop")

    def __init__(self, walk: Callable[[YearMonth, Any], Iterator[YearMonth]], start: YearMonth, stop: Any) -> None:
        self._walk = walk
        self._start = start
        self._stop = stop

    def __iter__(self) -> Iterator[YearMonth]:
        return self._walk(self._start, self._stop)

    def __repr__(self) -> str:
        return f"MonthRange({self._start!r}, {self._stop!r})"


def _months_from(start: YearMonth, count: int) -> Iterator[YearMonth]:
    for offset in range(count):
        yield start.add_months(offset)


def _months_between(start: YearMonth, end: YearMonth) -> Iterator[YearMonth]:
    current = start
    while current <= end:
        yield current
        if current == end:
            break
        current = current.next_month()


YearMonth.MIN_VALUE = YearMonth.from_value_unchecked(MIN_ENCODED_VALUE)
YearMonth.MAX_VALUE = YearMonth.from_value_unchecked(MAX_ENCODED_VALUE)
