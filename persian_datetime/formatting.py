"""Custom date/time patterns rendered and parsed over Persian calendar fields.

Patterns use the familiar ``yyyy/MM/dd HH:mm:ss`` letters: a run of the same
letter is one token, ``'...'`` and ``"..."`` quote literal text, ``\\`` escapes
a single character and ``%`` marks a lone letter as a token. ``/`` and ``:``
stand for the culture's date and time separators.

Persian fields are produced by :mod:`jdatetime`: padded numbers come from
``jdatetime.datetime.strftime`` and parsed dates are checked and converted
with ``jdatetime.date(...).togregorian()``. Names, designators and offsets
come from the culture tables.
"""
from __future__ import annotations

import re
from datetime import datetime, time
from enum import IntFlag
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import jdatetime

from . import calendar, clock
from .culture import DateTimeFormatInfo, DateTimeKind, get_culture, normalize_digits
from .errors import FormatError, RangeError

__all__ = [
    "DateTimeStyles",
    "format_ticks",
    "parse_exact_ticks",
    "parse_ticks",
    "tokenize",
]

_FIELD_CHARS = "dMyhHmsfFtgKz"
_MAX_FRACTION_DIGITS = 7


class DateTimeStyles(IntFlag):
    NONE = 0
    ALLOW_LEADING_WHITE = 1
    ALLOW_TRAILING_WHITE = 2
    ALLOW_WHITE_SPACES = ALLOW_LEADING_WHITE | ALLOW_TRAILING_WHITE
    ASSUME_LOCAL = 32
    ASSUME_UNIVERSAL = 64


Token = Tuple[str, str, int]


def tokenize(pattern: str) -> Iterator[Token]:
    """Yield ``("field", letter, run_length)`` and ``("literal", text, 0)`` tokens."""

    index = 0
    length = len(pattern)
    while index < length:
        ch = pattern[index]
        if ch in "'\"":
            end = index + 1
            chunk: List[str] = []
            while end < length and pattern[end] != ch:
                if pattern[end] == "\\" and end + 1 < length:
                    end += 1
                chunk.append(pattern[end])
                end += 1
            if end >= length:
                raise FormatError(f"unterminated quote in pattern {pattern!r}")
            yield ("literal", "".join(chunk), 0)
            index = end + 1
        elif ch == "\\":
            if index + 1 >= length:
                raise FormatError(f"dangling escape in pattern {pattern!r}")
            yield ("literal", pattern[index + 1], 0)
            index += 2
        elif ch == "%":
            if index + 1 >= length or pattern[index + 1] not in _FIELD_CHARS:
                raise FormatError(f"'%' must precede a pattern letter in {pattern!r}")
            yield ("field", pattern[index + 1], 1)
            index += 2
        elif ch in _FIELD_CHARS:
            end = index + 1
            while end < length and pattern[end] == ch:
                end += 1
            yield ("field", ch, end - index)
            index = end
        elif ch in "/:":
            yield ("separator", ch, 0)
            index += 1
        else:
            yield ("literal", ch, 0)
            index += 1


def _expand_standard(pattern: str, info: DateTimeFormatInfo) -> Optional[str]:
    """Return the custom pattern behind a one letter standard format."""

    standard = {
        "d": info.short_date_pattern,
        "D": info.long_date_pattern,
        "t": info.short_time_pattern,
        "T": info.long_time_pattern,
        "f": f"{info.long_date_pattern} - {info.short_time_pattern}",
        "F": info.full_date_time_pattern,
        "g": f"{info.short_date_pattern} {info.short_time_pattern}",
        "G": f"{info.short_date_pattern} {info.long_time_pattern}",
        "m": info.month_day_pattern,
        "M": info.month_day_pattern,
        "y": info.year_month_pattern,
        "Y": info.year_month_pattern,
    }
    return standard.get(pattern)


def _format_offset(offset_ticks: int, run: int) -> str:
    sign = "-" if offset_ticks < 0 else "+"
    minutes = abs(offset_ticks) // calendar.TICKS_PER_MINUTE
    hours, minutes = divmod(minutes, 60)
    if run == 1:
        return f"{sign}{hours}"
    if run == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _format_gregorian(ticks: int, kind: DateTimeKind, pattern: str) -> str:
    wall = calendar.ticks_to_datetime(ticks)
    stamp = (
        f"{wall.year:04d}-{wall.month:02d}-{wall.day:02d}"
        f"T{wall.hour:02d}:{wall.minute:02d}:{wall.second:02d}"
    )
    if pattern == "s":
        return stamp
    if pattern == "u":
        return stamp.replace("T", " ") + "Z"
    fraction = ticks % calendar.TICKS_PER_SECOND
    suffix = ""
    if kind == DateTimeKind.UTC:
        suffix = "Z"
    elif kind == DateTimeKind.LOCAL:
        suffix = _format_offset(clock.local_offset(ticks), 3)
    return f"{stamp}.{fraction:07d}{suffix}"


# tokens whose output matches a zero padded strftime directive
_STRFTIME_DIRECTIVES = {
    ("d", 2): "%d",
    ("M", 2): "%m",
    ("H", 2): "%H",
    ("m", 2): "%M",
    ("s", 2): "%S",
    ("f", 6): "%f",
}
_JALALI_LOCALE = "fa_IR"


def _to_jalali(ticks: int) -> jdatetime.datetime:
    try:
        return jdatetime.datetime.fromgregorian(
            datetime=calendar.ticks_to_datetime(ticks),
            locale=_JALALI_LOCALE,
        )
    except ValueError as exc:
        raise RangeError(f"{ticks} ticks cannot be rendered as a Jalali date: {exc}") from exc


def _from_jalali(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
    """Return the ticks of a Persian wall-clock time; ``FormatError`` if it does not exist."""

    try:
        gregorian = jdatetime.date(year, month, day).togregorian()
        moment = datetime.combine(gregorian, time(hour, minute, second))
    except ValueError as exc:
        raise FormatError(f"{year}/{month:02d}/{day:02d} {hour:02d}:{minute:02d}:{second:02d} is not a valid date: {exc}") from exc
    try:
        return calendar.check_ticks(calendar.datetime_to_ticks(moment))
    except RangeError as exc:
        raise FormatError(str(exc)) from exc


def format_ticks(
    ticks: int,
    kind: DateTimeKind,
    pattern: str,
    info: Optional[DateTimeFormatInfo] = None,
) -> str:
    """Render an instant with a standard letter or a custom pattern."""

    info = info or get_culture().date_time_format
    if not pattern:
        pattern = info.full_date_time_pattern
    if len(pattern) == 1:
        if pattern in "suoO":
            return _format_gregorian(ticks, kind, pattern)
        expanded = _expand_standard(pattern, info)
        if expanded is None:
            raise FormatError(f"unknown standard format {pattern!r}")
        pattern = expanded

    moment = _to_jalali(ticks)
    ordinal = calendar.ticks_to_ordinal(ticks)
    hour = moment.hour
    fraction = f"{ticks % calendar.TICKS_PER_SECOND:07d}"

    parts: List[str] = []
    for kind_of_token, value, run in tokenize(pattern):
        if kind_of_token == "literal":
            parts.append(value)
            continue
        if kind_of_token == "separator":
            parts.append(info.date_separator if value == "/" else info.time_separator)
            continue
        directive = _STRFTIME_DIRECTIVES.get((value, run))
        if directive:
            parts.append(normalize_digits(moment.strftime(directive)))
        elif value == "d":
            if run == 1:
                parts.append(str(moment.day))
            else:
                names = info.abbreviated_day_names if run == 3 else info.day_names
                parts.append(names[calendar.day_of_week(ordinal)])
        elif value == "M":
            if run == 1:
                parts.append(str(moment.month))
            else:
                names = info.abbreviated_month_names if run == 3 else info.month_names
                parts.append(names[moment.month - 1])
        elif value == "y":
            if run <= 2:
                parts.append(f"{moment.year % 100:0{run}d}")
            else:
                parts.append(f"{moment.year:0{run}d}")
        elif value in "hHms":
            number = {
                "h": hour % 12 or 12,
                "H": hour,
                "m": moment.minute,
                "s": moment.second,
            }[value]
            parts.append(f"{number:0{min(run, 2)}d}")
        elif value in "fF":
            if run > _MAX_FRACTION_DIGITS:
                raise FormatError(f"at most {_MAX_FRACTION_DIGITS} fraction digits are supported")
            digits = fraction[:run]
            parts.append(digits if value == "f" else digits.rstrip("0"))
        elif value == "t":
            designator = info.am_designator if hour < 12 else info.pm_designator
            parts.append(designator[:1] if run == 1 else designator)
        elif value == "g":
            parts.append(info.era_name)
        elif value == "K":
            for _ in range(run):
                if kind == DateTimeKind.UTC:
                    parts.append("Z")
                elif kind == DateTimeKind.LOCAL:
                    parts.append(_format_offset(clock.local_offset(ticks), 3))
        elif value == "z":
            offset = 0 if kind == DateTimeKind.UTC else clock.local_offset(ticks)
            parts.append(_format_offset(offset, min(run, 3)))
    return "".join(parts)


def _alternation(names: Sequence[str]) -> str:
    ordered = sorted({name for name in names if name}, key=len, reverse=True)
    return "|".join(re.escape(name) for name in ordered)


def _compile(pattern: str, info: DateTimeFormatInfo) -> Tuple["re.Pattern[str]", Dict[str, str]]:
    """Translate a pattern into a regular expression and a group → field map."""

    fields: Dict[str, str] = {}
    chunks: List[str] = []

    def group(field: str, body: str) -> str:
        name = f"g{len(fields)}"
        fields[name] = field
        return f"(?P<{name}>{body})"

    for kind_of_token, value, run in tokenize(pattern):
        if kind_of_token == "literal":
            chunks.append(r"\s+" if value.isspace() else re.escape(value))
            continue
        if kind_of_token == "separator":
            chunks.append(re.escape(info.date_separator if value == "/" else info.time_separator))
            continue
        if value == "d":
            if run <= 2:
                chunks.append(group("day", r"\d{1,2}" if run == 1 else r"\d{2}"))
            else:
                names = info.abbreviated_day_names if run == 3 else info.day_names
                chunks.append(group("day_name", _alternation(names)))
        elif value == "M":
            if run <= 2:
                chunks.append(group("month", r"\d{1,2}" if run == 1 else r"\d{2}"))
            else:
                names = info.abbreviated_month_names if run == 3 else info.month_names
                chunks.append(group("month_name", _alternation(names)))
        elif value == "y":
            if run <= 2:
                chunks.append(group("short_year", r"\d{1,2}" if run == 1 else r"\d{2}"))
            else:
                chunks.append(group("year", r"\d{1,4}"))
        elif value in "hHms":
            field = {"h": "hour12", "H": "hour", "m": "minute", "s": "second"}[value]
            chunks.append(group(field, r"\d{1,2}" if run == 1 else r"\d{2}"))
        elif value in "fF":
            if run > _MAX_FRACTION_DIGITS:
                raise FormatError(f"at most {_MAX_FRACTION_DIGITS} fraction digits are supported")
            body = rf"\d{{{run}}}" if value == "f" else rf"\d{{0,{run}}}"
            chunks.append(group("fraction", body))
        elif value == "t":
            designators = [info.am_designator, info.pm_designator]
            if run == 1:
                designators = [name[:1] for name in designators]
            chunks.append(group("designator", _alternation(designators)))
        elif value == "g":
            chunks.append(f"(?:{re.escape(info.era_name)})?")
        elif value == "K":
            chunks.append(group("offset", r"Z|[+-]\d{2}:\d{2}") + "?")
        elif value == "z":
            chunks.append(group("offset", r"[+-]\d{1,2}(?::\d{2})?"))
    return re.compile("".join(chunks) + r"\Z"), fields


def _offset_to_ticks(text: str) -> int:
    sign = -1 if text.startswith("-") else 1
    hours, _, minutes = text[1:].partition(":")
    return sign * (int(hours) * 60 + int(minutes or 0)) * calendar.TICKS_PER_MINUTE


def _resolve_year(short_year: int, info: DateTimeFormatInfo) -> int:
    year = info.two_digit_year_max // 100 * 100 + short_year
    if year > info.two_digit_year_max:
        year -= 100
    return year


def _collect(match: "re.Match[str]", fields: Dict[str, str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for name, field in fields.items():
        text = match.group(name)
        if text is None:
            continue
        if field in values and values[field] != text:
            raise FormatError(f"conflicting values for {field}: {values[field]!r} and {text!r}")
        values[field] = text
    return values


def _build(
    values: Dict[str, str],
    styles: DateTimeStyles,
    info: DateTimeFormatInfo,
) -> Tuple[int, DateTimeKind]:
    has_date = any(key in values for key in ("year", "short_year", "month", "month_name", "day"))
    today = calendar.from_ordinal(calendar.ticks_to_ordinal(clock.now_ticks()))

    if "year" in values:
        year = int(values["year"])
    elif "short_year" in values:
        year = _resolve_year(int(values["short_year"]), info)
    else:
        year = today.year
    if "month" in values:
        month = int(values["month"])
    elif "month_name" in values:
        month = list(info.month_names).index(values["month_name"]) + 1
    else:
        month = 1 if has_date else today.month
    day = int(values["day"]) if "day" in values else (1 if has_date else today.day)

    if "hour" in values:
        hour = int(values["hour"])
    else:
        hour = int(values.get("hour12", "0"))
    designator = values.get("designator")
    if designator:
        is_pm = info.pm_designator.startswith(designator)
        if hour > 12:
            raise FormatError(f"hour {hour} conflicts with designator {designator!r}")
        if is_pm and hour < 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0

    ticks = _from_jalali(
        year,
        month,
        day,
        hour,
        int(values.get("minute", "0")),
        int(values.get("second", "0")),
    )
    fraction = values.get("fraction", "")
    if fraction:
        ticks += int(fraction.ljust(_MAX_FRACTION_DIGITS, "0"))

    day_name = values.get("day_name")
    if day_name:
        names = info.day_names if day_name in info.day_names else info.abbreviated_day_names
        if calendar.day_of_week(calendar.ticks_to_ordinal(ticks)) != names.index(day_name):
            raise FormatError(f"{day_name!r} does not match {year}/{month:02d}/{day:02d}")

    offset = values.get("offset")
    if offset == "Z":
        return ticks, DateTimeKind.UTC
    if offset:
        try:
            utc = calendar.check_ticks(ticks - _offset_to_ticks(offset))
            return calendar.check_ticks(clock.utc_to_local(utc)), DateTimeKind.LOCAL
        except RangeError as exc:
            raise FormatError(f"{offset!r} moves the value out of range: {exc}") from exc
    if styles & DateTimeStyles.ASSUME_UNIVERSAL:
        return ticks, DateTimeKind.UTC
    if styles & DateTimeStyles.ASSUME_LOCAL:
        return ticks, DateTimeKind.LOCAL
    return ticks, DateTimeKind.UNSPECIFIED


def _prepare(text: str, styles: DateTimeStyles) -> str:
    text = normalize_digits(text)
    if styles & DateTimeStyles.ALLOW_LEADING_WHITE:
        text = text.lstrip()
    if styles & DateTimeStyles.ALLOW_TRAILING_WHITE:
        text = text.rstrip()
    return text


def parse_exact_ticks(
    text: str,
    formats: Union[str, Sequence[str]],
    styles: DateTimeStyles = DateTimeStyles.NONE,
    info: Optional[DateTimeFormatInfo] = None,
) -> Tuple[int, DateTimeKind]:
    """Parse ``text`` against one or more patterns; the first match wins."""

    info = info or get_culture().date_time_format
    if isinstance(formats, str):
        formats = [formats]
    if not formats:
        raise FormatError("at least one format is required")
    text = _prepare(text, styles)
    for pattern in formats:
        if not pattern:
            raise FormatError("format must not be empty")
        if len(pattern) == 1:
            expanded = _expand_standard(pattern, info)
            if expanded is None:
                raise FormatError(f"unknown standard format {pattern!r}")
            pattern = expanded
        regex, fields = _compile(pattern, info)
        match = regex.match(text)
        if match:
            return _build(_collect(match, fields), styles, info)
    raise FormatError(f"{text!r} does not match {list(formats)!r}")


_GENERAL_PATTERNS = (
    "dddd، d MMMM، yyyy - H:m:s",
    "dddd، d MMMM، yyyy - H:m",
    "dddd، d MMMM، yyyy",
    "d MMMM، yyyy - H:m:s",
    "d MMMM، yyyy",
    "d MMMM yyyy H:m:s",
    "d MMMM yyyy",
    "MMMM، yyyy",
    "yyyy/M/d - H:m:s",
    "yyyy/M/d - H:m",
    "yyyy/M/d H:m:s.FFFFFFF",
    "yyyy/M/d H:m:s",
    "yyyy/M/d H:m",
    "yyyy/M/d h:m:s tt",
    "yyyy/M/d h:m tt",
    "yyyy/M/d",
    "yyyy-M-d'T'H:m:s.FFFFFFFK",
    "yyyy-M-d'T'H:m:sK",
    "yyyy-M-d H:m:s",
    "yyyy-M-d",
    "yyyyMMdd",
    "H:m:s",
    "H:m",
)


def parse_ticks(
    text: str,
    styles: DateTimeStyles = DateTimeStyles.ALLOW_WHITE_SPACES,
    info: Optional[DateTimeFormatInfo] = None,
) -> Tuple[int, DateTimeKind]:
    """Parse ``text`` against the culture's common date and time layouts."""

    info = info or get_culture().date_time_format
    text = re.sub(r"\s+", " ", _prepare(text, styles | DateTimeStyles.ALLOW_WHITE_SPACES))
    for pattern in _GENERAL_PATTERNS:
        regex, fields = _compile(pattern, info)
        match = regex.match(text)
        if match:
            return _build(_collect(match, fields), styles, info)
    raise FormatError(f"{text!r} is not a recognised date")
