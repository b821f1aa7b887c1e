"""Persian calendar date and time of day, stored as an instant."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import total_ordering
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from . import calendar, clock, formatting
from .culture import DateTimeKind, DayOfWeek, get_culture
from .errors import (
    FormatError,
    InvalidConversionError,
    NullInputError,
    PersianCalendarError,
    RangeError,
)
from .formatting import DateTimeStyles
from .logs import get_logger

__all__ = ["PersianDateTime"]

logger = get_logger(__name__)

DATE_FIELD = "_date"
NAMED_FORMATS = ("d", "D", "t", "T", "f", "F", "y", "N", "dt", "dT", "Dt", "DT")

_KIND_SHIFT = 62
_TICKS_MASK = (1 << _KIND_SHIFT) - 1
_FILE_TIME_OFFSET = (date(1601, 1, 1).toordinal() - 1) * calendar.TICKS_PER_DAY


def _timedelta_ticks(value: timedelta) -> int:
    return (value.days * 86400 + value.seconds) * calendar.TICKS_PER_SECOND + value.microseconds * 10


def _substitute_day_names(text: str) -> str:
    """Rewrite common spellings of weekday names into the culture's own."""

    days = get_culture().date_time_format.day_names
    return (
        text.replace("یک شنبه", days[DayOfWeek.SUNDAY])
        .replace("دو شنبه", days[DayOfWeek.MONDAY])
        .replace("سه\u200cشنبه", days[DayOfWeek.TUESDAY])
        .replace("چهار شنبه", days[DayOfWeek.WEDNESDAY])
        .replace("پنجشنبه", days[DayOfWeek.THURSDAY])
    )


@total_ordering
@dataclass(frozen=True, init=False, eq=False, repr=False)
class PersianDateTime:
    """An instant whose calendar fields are read in the Persian calendar.

    The value is a tick count (100 ns units since 0001-01-01) plus a
    :class:`DateTimeKind`. Arithmetic returns new instances; reads never fall
    below :attr:`MIN_VALUE`.
    """

    _ticks: int
    _kind: DateTimeKind

    MIN_VALUE = None  # type: PersianDateTime
    MAX_VALUE = None  # type: PersianDateTime

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        kind: DateTimeKind = DateTimeKind.UNSPECIFIED,
    ) -> None:
        ticks = calendar.persian_to_ticks(year, month, day, hour, minute, second, millisecond)
        object.__setattr__(self, "_ticks", ticks)
        object.__setattr__(self, "_kind", DateTimeKind(kind))

    @classmethod
    def _from_raw(cls, ticks: int, kind: DateTimeKind) -> "PersianDateTime":
        instance = cls.__new__(cls)
        object.__setattr__(instance, "_ticks", ticks)
        object.__setattr__(instance, "_kind", DateTimeKind(kind))
        return instance

    @classmethod
    def from_ticks(cls, ticks: int, kind: DateTimeKind = DateTimeKind.UNSPECIFIED) -> "PersianDateTime":
        return cls._from_raw(calendar.check_ticks(ticks), kind)

    @classmethod
    def from_datetime(cls, value: Union[date, datetime]) -> "PersianDateTime":
        """Wrap a ``datetime``; values before the calendar's first day become :attr:`MIN_VALUE`.

        Naive values keep :attr:`DateTimeKind.UNSPECIFIED`, UTC values become
        :attr:`DateTimeKind.UTC` and any other aware value is converted to the
        local wall clock with :attr:`DateTimeKind.LOCAL`.
        """

        if value is None:
            raise NullInputError("value is required")
        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min)
        kind = DateTimeKind.UNSPECIFIED
        if value.tzinfo is not None:
            if value.tzname() == "UTC":
                kind = DateTimeKind.UTC
            else:
                value = value.astimezone()
                kind = DateTimeKind.LOCAL
        ticks = max(calendar.datetime_to_ticks(value), calendar.MIN_SUPPORTED_TICKS)
        return cls._from_raw(ticks, kind)

    @classmethod
    def from_binary(cls, data: int) -> "PersianDateTime":
        return cls.from_ticks(data & _TICKS_MASK, DateTimeKind((data >> _KIND_SHIFT) & 3))

    @classmethod
    def from_file_time_utc(cls, file_time: int) -> "PersianDateTime":
        if file_time < 0:
            raise RangeError("file time must not be negative")
        return cls.from_ticks(file_time + _FILE_TIME_OFFSET, DateTimeKind.UTC)

    @classmethod
    def from_file_time(cls, file_time: int) -> "PersianDateTime":
        return cls.from_file_time_utc(file_time).to_local_time()

    @classmethod
    def now(cls) -> "PersianDateTime":
        return cls.from_ticks(clock.now_ticks(), DateTimeKind.LOCAL)

    @classmethod
    def today(cls) -> "PersianDateTime":
        return cls.now().date

    @classmethod
    def utc_now(cls) -> "PersianDateTime":
        return cls.from_ticks(clock.utc_now_ticks(), DateTimeKind.UTC)

    # Properties -----------------------------------------------------------

    @property
    def ticks(self) -> int:
        return max(self._ticks, calendar.MIN_SUPPORTED_TICKS)

    @property
    def kind(self) -> DateTimeKind:
        return self._kind

    @property
    def _ordinal(self) -> int:
        return calendar.ticks_to_ordinal(self.ticks)

    @property
    def _persian(self) -> calendar.PersianDate:
        return calendar.from_ordinal(self._ordinal)

    @property
    def year(self) -> int:
        return self._persian.year

    @property
    def month(self) -> int:
        return self._persian.month

    @property
    def day(self) -> int:
        return self._persian.day

    @property
    def day_of_week(self) -> DayOfWeek:
        return DayOfWeek(calendar.day_of_week(self._ordinal))

    @property
    def persian_day_of_week(self) -> str:
        return get_culture().date_time_format.get_day_name(self.day_of_week)

    @property
    def day_of_year(self) -> int:
        return calendar.day_of_year(self._ordinal)

    @property
    def month_of_year(self) -> str:
        return get_culture().date_time_format.get_month_name(self.month)

    @property
    def hour(self) -> int:
        return self.ticks % calendar.TICKS_PER_DAY // calendar.TICKS_PER_HOUR

    @property
    def minute(self) -> int:
        return self.ticks // calendar.TICKS_PER_MINUTE % 60

    @property
    def second(self) -> int:
        return self.ticks // calendar.TICKS_PER_SECOND % 60

    @property
    def millisecond(self) -> int:
        return self.ticks // calendar.TICKS_PER_MILLISECOND % 1000

    @property
    def time_of_day(self) -> timedelta:
        return timedelta(microseconds=self.ticks % calendar.TICKS_PER_DAY // 10)

    @property
    def date(self) -> "PersianDateTime":
        ticks = self.ticks
        return PersianDateTime._from_raw(ticks - ticks % calendar.TICKS_PER_DAY, self._kind)

    # Calendar helpers -----------------------------------------------------

    @staticmethod
    def days_in_month(year: int, month: int) -> int:
        return calendar.days_in_month(year, month)

    @staticmethod
    def days_in_year(year: int) -> int:
        return calendar.days_in_year(year)

    @staticmethod
    def is_leap_year(year: int) -> bool:
        return calendar.is_leap_year(year)

    def is_daylight_saving_time(self) -> bool:
        """Return ``True`` for the first six months of the year."""

        return self.month <= 6

    # Arithmetic -----------------------------------------------------------

    def _with_ticks(self, ticks: int) -> "PersianDateTime":
        return PersianDateTime._from_raw(ticks, self._kind)

    def add(self, value: timedelta) -> "PersianDateTime":
        return self._with_ticks(calendar.check_ticks(self.ticks + _timedelta_ticks(value)))

    def add_days(self, value: float) -> "PersianDateTime":
        return self._with_ticks(calendar.add_days(self.ticks, value))

    def add_hours(self, value: float) -> "PersianDateTime":
        return self._with_ticks(calendar.add_hours(self.ticks, value))

    def add_minutes(self, value: float) -> "PersianDateTime":
        return self._with_ticks(calendar.add_minutes(self.ticks, value))

    def add_seconds(self, value: float) -> "PersianDateTime":
        return self._with_ticks(calendar.add_seconds(self.ticks, value))

    def add_milliseconds(self, value: float) -> "PersianDateTime":
        return self._with_ticks(calendar.add_milliseconds(self.ticks, value))

    def add_ticks(self, value: int) -> "PersianDateTime":
        ticks = self.ticks + value
        if ticks < 0 or ticks > calendar.MAX_SUPPORTED_TICKS:
            raise RangeError(f"adding {value} ticks leaves the supported range")
        # results before the calendar's first day read back as MIN_VALUE
        return self._with_ticks(ticks)

    def add_months(self, value: int) -> "PersianDateTime":
        return self._with_ticks(calendar.add_months(self.ticks, value))

    def add_years(self, value: int) -> "PersianDateTime":
        return self._with_ticks(calendar.add_years(self.ticks, value))

    def subtract(self, value: Union["PersianDateTime", timedelta]) -> Union[timedelta, "PersianDateTime"]:
        if isinstance(value, PersianDateTime):
            return timedelta(microseconds=(self.ticks - value.ticks) // 10)
        return self.add(-value)

    def __add__(self, value: timedelta) -> "PersianDateTime":
        if not isinstance(value, timedelta):
            return NotImplemented
        return self.add(value)

    __radd__ = __add__

    def __sub__(self, value: Union["PersianDateTime", timedelta]) -> Any:
        if not isinstance(value, (PersianDateTime, timedelta)):
            return NotImplemented
        return self.subtract(value)

    # Comparison -----------------------------------------------------------

    @staticmethod
    def compare(first: "PersianDateTime", second: "PersianDateTime") -> int:
        if first.ticks > second.ticks:
            return 1
        if first.ticks < second.ticks:
            return -1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersianDateTime):
            return NotImplemented
        return self.ticks == other.ticks

    def __lt__(self, other: "PersianDateTime") -> bool:
        if not isinstance(other, PersianDateTime):
            return NotImplemented
        return self.ticks < other.ticks

    def __hash__(self) -> int:
        return hash(self.ticks)

    # Conversions ----------------------------------------------------------

    def to_datetime(self) -> datetime:
        """Return the wall clock as a ``datetime``; UTC values are timezone aware."""

        value = calendar.ticks_to_datetime(self.ticks)
        if self._kind == DateTimeKind.UTC:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_local_time(self) -> "PersianDateTime":
        if self._kind == DateTimeKind.LOCAL:
            return self
        ticks = min(clock.utc_to_local(self.ticks), calendar.MAX_SUPPORTED_TICKS)
        return PersianDateTime._from_raw(ticks, DateTimeKind.LOCAL)

    def to_universal_time(self) -> "PersianDateTime":
        if self._kind == DateTimeKind.UTC:
            return self
        ticks = min(clock.local_to_utc(self.ticks), calendar.MAX_SUPPORTED_TICKS)
        return PersianDateTime._from_raw(ticks, DateTimeKind.UTC)

    def to_binary(self) -> int:
        return self.ticks | (int(self._kind) << _KIND_SHIFT)

    def to_file_time_utc(self) -> int:
        ticks = self.to_universal_time().ticks if self._kind == DateTimeKind.LOCAL else self.ticks
        if ticks < _FILE_TIME_OFFSET:
            raise RangeError("instant precedes 1601-01-01, the file time epoch")
        return ticks - _FILE_TIME_OFFSET

    def to_file_time(self) -> int:
        return self.to_universal_time().to_file_time_utc()

    def convert(self, target: type) -> Any:
        """Convert to ``datetime``, ``date`` or ``str``."""

        if target is datetime:
            return self.to_datetime()
        if target is date:
            return self.to_datetime().date()
        if target is str:
            return str(self)
        raise InvalidConversionError(f"a PersianDateTime cannot be converted to {target.__name__}")

    def serialize(self) -> dict:
        return {DATE_FIELD: self.to_binary()}

    @classmethod
    def deserialize(cls, data: Mapping[str, Any]) -> "PersianDateTime":
        if data is None:
            raise NullInputError("data is required")
        if DATE_FIELD not in data:
            raise FormatError("invalid serialization data")
        return cls.from_binary(int(data[DATE_FIELD]))

    def __reduce__(self):
        return (PersianDateTime.from_binary, (self.to_binary(),))

    # Formatting -----------------------------------------------------------

    def to_string(self, fmt: Optional[str] = None) -> str:
        """Render the value.

        Named formats: ``d`` ``1403/07/09``, ``D`` ``دوشنبه، 9 مهر، 1403``,
        ``t`` ``HH:mm``, ``T`` ``HH:mm:ss``, two letter combinations of those
        joined with ``" - "``, ``f`` (``Dt``), ``F`` (``DT``), ``y``/``Y``
        ``مهر، 1403`` and ``N`` ``14030709``. Any other pattern is rendered as a
        custom pattern such as ``"yyyy-MM-dd HH:mm"``.
        """

        if fmt is None:
            fmt = "F"
        if fmt == "d":
            return f"{self.year}/{self.month:02d}/{self.day:02d}"
        if fmt == "D":
            return f"{self.persian_day_of_week}، {self.day} {self.month_of_year}، {self.year}"
        if fmt == "t":
            return f"{self.hour:02d}:{self.minute:02d}"
        if fmt == "T":
            return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        if fmt in ("dt", "td"):
            return self.to_string("d") + " - " + self.to_string("t")
        if fmt in ("DT", "TD"):
            return self.to_string("D") + " - " + self.to_string("T")
        if fmt in ("dT", "Td"):
            return self.to_string("d") + " - " + self.to_string("T")
        if fmt in ("Dt", "tD"):
            return self.to_string("D") + " - " + self.to_string("t")
        if fmt == "f":
            return self.to_string("Dt")
        if fmt == "F":
            return self.to_string("DT")
        if fmt in ("y", "Y"):
            return f"{self.month_of_year}، {self.year}"
        if fmt == "N":
            return f"{self.year}{self.month:02d}{self.day:02d}"
        return formatting.format_ticks(self.ticks, self._kind, fmt)

    def __str__(self) -> str:
        return self.to_string("F")

    def __repr__(self) -> str:
        return (
            f"PersianDateTime({self.year}, {self.month}, {self.day}, {self.hour}, "
            f"{self.minute}, {self.second}, {self.millisecond}, kind={self._kind.name})"
        )

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec or "F")

    def get_date_time_formats(self, fmt: Optional[str] = None) -> List[str]:
        if fmt is not None:
            return [self.to_string(fmt)]
        return [self.to_string(code) for code in NAMED_FORMATS]

    # Parsing --------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "PersianDateTime":
        if text is None:
            raise NullInputError("text is required")
        ticks, kind = formatting.parse_ticks(_substitute_day_names(text))
        return cls._from_raw(ticks, kind)

    @classmethod
    def parse_exact(
        cls,
        text: str,
        formats: Union[str, Sequence[str]],
        styles: DateTimeStyles = DateTimeStyles.NONE,
    ) -> "PersianDateTime":
        if text is None:
            raise NullInputError("text is required")
        if formats is None:
            raise NullInputError("formats are required")
        ticks, kind = formatting.parse_exact_ticks(_substitute_day_names(text), formats, styles)
        return cls._from_raw(ticks, kind)

    @classmethod
    def try_parse(cls, text: Optional[str]) -> Tuple[bool, "PersianDateTime"]:
        try:
            return True, cls.parse(text)  # type: ignore[arg-type]
        except (PersianCalendarError, ValueError, OverflowError) as exc:
            logger.debug("rejected date %r: %s", text, exc)
            return False, cls.MIN_VALUE

    @classmethod
    def try_parse_exact(
        cls,
        text: Optional[str],
        formats: Union[str, Sequence[str]],
        styles: DateTimeStyles = DateTimeStyles.NONE,
    ) -> Tuple[bool, "PersianDateTime"]:
        try:
            return True, cls.parse_exact(text, formats, styles)  # type: ignore[arg-type]
        except (PersianCalendarError, ValueError, OverflowError) as exc:
            logger.debug("rejected date %r for %r: %s", text, formats, exc)
            return False, cls.MIN_VALUE


PersianDateTime.MIN_VALUE = PersianDateTime._from_raw(calendar.MIN_SUPPORTED_TICKS, DateTimeKind.UNSPECIFIED)
PersianDateTime.MAX_VALUE = PersianDateTime._from_raw(calendar.MAX_SUPPORTED_TICKS, DateTimeKind.UNSPECIFIED)
