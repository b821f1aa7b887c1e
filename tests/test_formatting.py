from datetime import timedelta

import pytest

from persian_datetime import DateTimeKind, DateTimeStyles, PersianDateTime
from persian_datetime.culture import DateTimeFormatInfo
from persian_datetime.errors import FormatError, NullInputError, RangeError
from persian_datetime.formatting import format_ticks, tokenize


@pytest.fixture
def moment():
    return PersianDateTime(1403, 7, 9, 14, 30)


@pytest.mark.parametrize(
    "code,expected",
    [
        ("d", "1403/07/09"),
        ("N", "14030709"),
        ("t", "14:30"),
        ("T", "14:30:00"),
        ("D", "دوشنبه، 9 مهر، 1403"),
        ("F", "دوشنبه، 9 مهر، 1403 - 14:30:00"),
        ("f", "دوشنبه، 9 مهر، 1403 - 14:30"),
        ("dt", "1403/07/09 - 14:30"),
        ("dT", "1403/07/09 - 14:30:00"),
        ("y", "مهر، 1403"),
        ("Y", "مهر، 1403"),
    ],
)
def test_named_formats(moment, code, expected):
    assert moment.to_string(code) == expected


def test_default_string_is_full_format(moment):
    assert str(moment) == moment.to_string("F")
    assert moment.to_string() == moment.to_string("F")
    assert f"{moment:d}" == "1403/07/09"
    assert f"{moment}" == str(moment)


def test_get_date_time_formats(moment):
    rendered = moment.get_date_time_formats()
    assert len(rendered) == 12
    assert rendered[0] == "1403/07/09"
    assert moment.get_date_time_formats("N") == ["14030709"]


@pytest.mark.parametrize(
    "pattern,expected",
    [
        ("yyyy-MM-dd HH:mm", "1403-07-09 14:30"),
        ("hh:mm tt", "02:30 ب.ظ"),
        ("h t", "2 ب"),
        ("dddd d MMMM", "دوشنبه 9 مهر"),
        ("dd MMM yy", "09 مهر 03"),
        ("yyyyy", "01403"),
        ("%d", "9"),
        ("'Year' yyyy", "Year 1403"),
        ("\\d yyyy", "d 1403"),
        ("yyyy g", "1403 ه.ش"),
        ("g", "1403/07/09 14:30"),
        ("M", "9 مهر"),
        ("HH:mmK", "14:30"),
    ],
)
def test_custom_patterns(moment, pattern, expected):
    assert moment.to_string(pattern) == expected


def test_fraction_tokens():
    value = PersianDateTime(1403, 7, 9, 14, 30, 15, 120)
    assert value.to_string("ss.fff") == "15.120"
    assert value.to_string("ss.FFF") == "15.12"
    assert value.to_string("ss.F") == "15.1"
    assert PersianDateTime(1403, 7, 9).to_string("ss.FFF") == "00."


def test_morning_designator():
    assert PersianDateTime(1403, 7, 9, 0, 5).to_string("hh:mm tt") == "12:05 ق.ظ"


def test_gregorian_round_trip_formats():
    utc = PersianDateTime(1403, 7, 9, 14, 30, kind=DateTimeKind.UTC)
    assert utc.to_string("s") == "2024-09-30T14:30:00"
    assert utc.to_string("u") == "2024-09-30 14:30:00Z"
    assert utc.to_string("o") == "2024-09-30T14:30:00.0000000Z"
    assert utc.to_string("yyyy/MM/dd K") == "1403/07/09 Z"
    assert utc.to_string("zzz") == "+00:00"
    assert PersianDateTime(1403, 7, 9, 14, 30).to_string("o") == "2024-09-30T14:30:00.0000000"


@pytest.mark.parametrize("pattern", ["Q", "ffffffff", "'open", "yyyy\\", "%"])
def test_invalid_patterns(moment, pattern):
    with pytest.raises(FormatError):
        moment.to_string(pattern)


def test_format_with_custom_culture_tables(moment):
    info = DateTimeFormatInfo(date_separator="-", time_separator=".")
    assert format_ticks(moment.ticks, moment.kind, "d", info) == "1403-07-09"
    assert format_ticks(moment.ticks, moment.kind, "HH:mm", info) == "14.30"


def test_tokenize():
    assert list(tokenize("yyyy/MM 'at' %d")) == [
        ("field", "y", 4),
        ("separator", "/", 0),
        ("field", "M", 2),
        ("literal", " ", 0),
        ("literal", "at", 0),
        ("literal", " ", 0),
        ("field", "d", 1),
    ]


# Parsing ------------------------------------------------------------------


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1403/07/09", PersianDateTime(1403, 7, 9)),
        ("1403/7/9", PersianDateTime(1403, 7, 9)),
        ("  1403/07/09  ", PersianDateTime(1403, 7, 9)),
        ("۱۴۰۳/۰۷/۰۹", PersianDateTime(1403, 7, 9)),
        ("14030709", PersianDateTime(1403, 7, 9)),
        ("1403-07-09", PersianDateTime(1403, 7, 9)),
        ("1403/07/09 14:30", PersianDateTime(1403, 7, 9, 14, 30)),
        ("1403/07/09 - 14:30:00", PersianDateTime(1403, 7, 9, 14, 30)),
        ("1403/07/09 2:30 ب.ظ", PersianDateTime(1403, 7, 9, 14, 30)),
        ("1403/07/09 14:30:15.25", PersianDateTime(1403, 7, 9, 14, 30, 15, 250)),
        ("دوشنبه، 9 مهر، 1403 - 14:30:00", PersianDateTime(1403, 7, 9, 14, 30)),
        ("دوشنبه، 9 مهر، 1403", PersianDateTime(1403, 7, 9)),
        ("یک شنبه، 8 مهر، 1403", PersianDateTime(1403, 7, 8)),
        ("دو شنبه، 9 مهر، 1403", PersianDateTime(1403, 7, 9)),
        ("سه\u200cشنبه، 10 مهر، 1403", PersianDateTime(1403, 7, 10)),
        ("چهار شنبه، 11 مهر، 1403", PersianDateTime(1403, 7, 11)),
        ("پنجشنبه، 12 مهر، 1403", PersianDateTime(1403, 7, 12)),
        ("9 مهر، 1403", PersianDateTime(1403, 7, 9)),
        ("مهر، 1403", PersianDateTime(1403, 7, 1)),
    ],
)
def test_parse_common_layouts(text, expected):
    parsed = PersianDateTime.parse(text)
    assert parsed == expected
    assert parsed.kind == DateTimeKind.UNSPECIFIED


def test_parse_rendered_named_formats_round_trip(moment):
    for code in ("d", "D", "F", "f", "dt", "dT", "N"):
        parsed = PersianDateTime.parse(moment.to_string(code))
        assert parsed.year == 1403
        assert parsed.month == 7
        assert parsed.day == 9


def test_parse_iso_like_text_with_offset():
    parsed = PersianDateTime.parse("1403-07-09T14:30:00Z")
    assert parsed == PersianDateTime(1403, 7, 9, 14, 30)
    assert parsed.kind == DateTimeKind.UTC


def test_parse_time_only_uses_today():
    parsed = PersianDateTime.parse("14:30")
    assert (parsed.hour, parsed.minute) == (14, 30)
    assert abs(parsed.date - PersianDateTime.today()) <= timedelta(days=1)


@pytest.mark.parametrize(
    "text",
    ["", "garbage", "1403/13/01", "1403/12/31", "یکشنبه، 9 مهر، 1403", "1403/07/09 25:00"],
)
def test_parse_rejects(text):
    with pytest.raises(FormatError):
        PersianDateTime.parse(text)


def test_parse_requires_text():
    with pytest.raises(NullInputError):
        PersianDateTime.parse(None)
    with pytest.raises(NullInputError):
        PersianDateTime.parse_exact("1403/07/09", None)


def test_parse_exact_custom_patterns():
    assert PersianDateTime.parse_exact("09-07-1403", "dd-MM-yyyy") == PersianDateTime(1403, 7, 9)
    assert PersianDateTime.parse_exact(
        "1403/07/09 02:30 ب.ظ", "yyyy/MM/dd hh:mm tt"
    ) == PersianDateTime(1403, 7, 9, 14, 30)
    assert PersianDateTime.parse_exact(
        "1403/07/09 12:15 ق.ظ", "yyyy/MM/dd hh:mm tt"
    ) == PersianDateTime(1403, 7, 9, 0, 15)
    assert PersianDateTime.parse_exact(
        "1403/07/09 14:30:15.250", "yyyy/MM/dd HH:mm:ss.fff"
    ).millisecond == 250
    assert PersianDateTime.parse_exact("1403/07/09", "d") == PersianDateTime(1403, 7, 9)


def test_parse_exact_tries_each_format():
    formats = ["yyyy/MM/dd", "yyyy.MM.dd"]
    assert PersianDateTime.parse_exact("1403.07.09", formats) == PersianDateTime(1403, 7, 9)


def test_parse_exact_whitespace_styles():
    with pytest.raises(FormatError):
        PersianDateTime.parse_exact(" 1403/07/09 ", "yyyy/MM/dd")
    parsed = PersianDateTime.parse_exact(" 1403/07/09 ", "yyyy/MM/dd", DateTimeStyles.ALLOW_WHITE_SPACES)
    assert parsed == PersianDateTime(1403, 7, 9)
    with pytest.raises(FormatError):
        PersianDateTime.parse_exact("1403/07/09 ", "yyyy/MM/dd", DateTimeStyles.ALLOW_LEADING_WHITE)


def test_parse_exact_kind():
    assert PersianDateTime.parse_exact(
        "1403/07/09", "yyyy/MM/dd", DateTimeStyles.ASSUME_UNIVERSAL
    ).kind == DateTimeKind.UTC
    assert PersianDateTime.parse_exact(
        "1403/07/09", "yyyy/MM/dd", DateTimeStyles.ASSUME_LOCAL
    ).kind == DateTimeKind.LOCAL
    parsed = PersianDateTime.parse_exact("1403/07/09 14:30Z", "yyyy/MM/dd HH:mmK")
    assert parsed.kind == DateTimeKind.UTC
    assert parsed.hour == 14


@pytest.mark.parametrize("text,year", [("03/07/09", 1403), ("10/01/01", 1410), ("20/07/09", 1320)])
def test_parse_exact_two_digit_years(text, year):
    assert PersianDateTime.parse_exact(text, "yy/MM/dd").year == year


@pytest.mark.parametrize(
    "text,formats",
    [
        ("1403/07/09", "Q"),
        ("1403/07/09", []),
        ("1403/07/09 10", "yyyy/MM/dd dd"),
        ("1403/07/09 13:00 ب.ظ", "yyyy/MM/dd HH:mm tt"),
        ("1403/12/31", "yyyy/MM/dd"),
        ("1403/7/9", "yyyy/MM/dd"),
    ],
)
def test_parse_exact_rejects(text, formats):
    with pytest.raises(FormatError):
        PersianDateTime.parse_exact(text, formats)


def test_try_parse():
    assert PersianDateTime.try_parse("1403/07/09") == (True, PersianDateTime(1403, 7, 9))
    assert PersianDateTime.try_parse("garbage") == (False, PersianDateTime.MIN_VALUE)
    assert PersianDateTime.try_parse(None) == (False, PersianDateTime.MIN_VALUE)


def test_try_parse_exact():
    ok, value = PersianDateTime.try_parse_exact("09-07-1403", "dd-MM-yyyy")
    assert ok
    assert value == PersianDateTime(1403, 7, 9)
    assert PersianDateTime.try_parse_exact("1403/07/09", "dd-MM-yyyy") == (False, PersianDateTime.MIN_VALUE)


def test_parse_with_numeric_offset_is_local():
    parsed = PersianDateTime.parse("1403-07-09T14:30:00+03:30")
    assert parsed.kind == DateTimeKind.LOCAL
    assert parsed.to_universal_time() == PersianDateTime(1403, 7, 9, 11, 0)


@pytest.mark.parametrize(
    "text",
    [
        "0001-01-01T00:59:59+01:00",
        "0001-01-01T00:00:00+01:00",
    ],
)
def test_offsets_leaving_the_supported_range_are_rejected(text):
    with pytest.raises(FormatError):
        PersianDateTime.parse(text)
    assert PersianDateTime.try_parse(text) == (False, PersianDateTime.MIN_VALUE)


def test_try_parse_exact_absorbs_offsets_out_of_range():
    result = PersianDateTime.try_parse_exact("0001/01/01 00:30+01:00", "yyyy/MM/dd HH:mmzzz")
    assert result == (False, PersianDateTime.MIN_VALUE)


def test_numbers_render_with_ascii_digits():
    value = PersianDateTime(1403, 1, 2, 3, 4, 5)
    assert value.to_string("dd/MM HH:mm:ss") == "02/01 03:04:05"
    assert value.to_string("yyyy/M/d H:m:s") == "1403/1/2 3:4:5"


def test_last_year_renders_through_named_codes_only():
    maximum = PersianDateTime.MAX_VALUE
    assert maximum.to_string("d") == "9378/10/10"
    assert maximum.to_string("N") == "93781010"
    with pytest.raises(RangeError):
        maximum.to_string("yyyy/MM/dd")
