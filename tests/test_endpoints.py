import importlib
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from persian_datetime.api import endpoints
from persian_datetime.boot import boot_session
from persian_datetime.errors import FormatError, NullInputError, RangeError


@pytest.fixture
def preferences():
    module = importlib.import_module("persian_datetime.api.preferences")
    return importlib.reload(module)


def test_format_datetime_uses_resolved_format(preferences):
    assert endpoints.format_datetime("2024-09-30T14:30:00") == "دوشنبه، 9 مهر، 1403 - 14:30:00"
    preferences.set_system_format("datetime", "d")
    assert endpoints.format_datetime(date(2024, 9, 30)) == "1403/07/09"
    assert endpoints.format_datetime(datetime(2024, 9, 30, 14, 30), fmt="HH:mm") == "14:30"


def test_format_datetime_requires_value(preferences):
    with pytest.raises(NullInputError):
        endpoints.format_datetime(None)


def test_parse_datetime_returns_gregorian_iso(preferences):
    assert endpoints.parse_datetime("1403/07/09 14:30") == "2024-09-30T14:30:00"
    assert endpoints.parse_datetime("09-07-1403", fmt="dd-MM-yyyy") == "2024-09-30T00:00:00"
    with pytest.raises(FormatError):
        endpoints.parse_datetime("not a date")


def test_format_month(preferences):
    assert endpoints.format_month(140307) == "1403/07"
    assert endpoints.format_month("1403/07", fmt="mmm yyyy") == "مهر 1403"
    preferences.set_user_format("month", "yyyymm", user="demo@example.com")
    assert endpoints.format_month("140307", user="demo@example.com") == "140307"


def test_month_range_by_count(preferences):
    months = endpoints.month_range("1403/11", count=3)
    assert [month["value"] for month in months] == [140311, 140312, 140401]
    assert [month["label"] for month in months] == ["1403/11", "1403/12", "1404/01"]
    assert [month["days"] for month in months] == [30, 30, 31]
    assert months[0]["start_date"] == "2025-01-20"
    assert months[1]["start_date"] == "2025-02-19"
    assert months[1]["end_date"] == "2025-03-20"
    assert months[2]["start_date"] == "2025-03-21"


def test_month_range_until_end(preferences):
    months = endpoints.month_range(140310, end=140401)
    assert [month["value"] for month in months] == [140310, 140311, 140312, 140401]
    assert endpoints.month_range(140401, end=140310) == []
    with pytest.raises(ValueError):
        endpoints.month_range(140401)
    with pytest.raises(RangeError):
        endpoints.month_range(140401, count=-2)


def test_name_tables():
    tables = endpoints.get_name_tables()
    assert tables["month_names"][6] == "مهر"
    assert tables["day_names"][1] == "دوشنبه"


def test_boot_session_populates_dict(preferences):
    bootinfo = {}
    boot_session(bootinfo)
    payload = bootinfo["persian_datetime"]
    assert payload["datetime_format"] == "F"
    assert payload["month_format"] == "yyyy/mm"
    assert payload["names"]["month_names"][0] == "فروردین"


def test_boot_session_populates_attribute_container(preferences):
    preferences.set_system_format("month", "yyyymm")
    bootinfo = SimpleNamespace()
    boot_session(bootinfo)
    assert bootinfo.persian_datetime["month_format"] == "yyyymm"
    assert bootinfo.persian_datetime["month_source"] == "system"


def test_hooks_point_at_boot_session():
    hooks = importlib.import_module("persian_datetime.hooks")
    module_name, _, attribute = hooks.boot_session.rpartition(".")
    assert getattr(importlib.import_module(module_name), attribute) is boot_session
    assert hooks.app_name == "persian_datetime"


@pytest.mark.parametrize(
    "value,expected",
    [("2024-03-20", "1403/01/01"), ("2017/01/01", "1395/10/12"), (date(2024, 9, 30), "1403/07/09")],
)
def test_gregorian_to_persian(value, expected):
    assert endpoints.gregorian_to_persian(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [("1403/01/01", "2024-03-20"), ("1403-12-30", "2025-03-20"), ("۱۴۰۳/۰۷/۰۹", "2024-09-30")],
)
def test_persian_to_gregorian(value, expected):
    assert endpoints.persian_to_gregorian(value) == expected


def test_date_conversions_reject_bad_input():
    with pytest.raises(RangeError):
        endpoints.persian_to_gregorian("1402/12/30")
    with pytest.raises(ValueError):
        endpoints.persian_to_gregorian("1403/01")
    with pytest.raises(NullInputError):
        endpoints.gregorian_to_persian(None)
