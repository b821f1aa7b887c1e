"""Host clock and time zone helpers expressed in ticks."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .calendar import TICKS_PER_SECOND, datetime_to_ticks, ticks_to_datetime

__all__ = [
    "local_offset",
    "local_to_utc",
    "now_ticks",
    "utc_now_ticks",
    "utc_to_local",
]


def now_ticks() -> int:
    return datetime_to_ticks(datetime.now())


def utc_now_ticks() -> int:
    return datetime_to_ticks(datetime.now(timezone.utc))


def _offset_ticks(offset: timedelta) -> int:
    return int(offset.total_seconds()) * TICKS_PER_SECOND


def local_offset(ticks: int) -> int:
    """Return the local UTC offset, in ticks, at a local wall-clock instant."""

    wall = ticks_to_datetime(ticks)
    try:
        offset = wall.astimezone().utcoffset()
    except (OverflowError, OSError, ValueError):
        # outside the platform's time_t range; use today's offset
        offset = datetime.now().astimezone().utcoffset()
    return _offset_ticks(offset or timedelta(0))


def utc_to_local(ticks: int) -> int:
    wall = ticks_to_datetime(ticks).replace(tzinfo=timezone.utc)
    try:
        offset = wall.astimezone().utcoffset()
    except (OverflowError, OSError, ValueError):
        offset = datetime.now().astimezone().utcoffset()
    return ticks + _offset_ticks(offset or timedelta(0))


def local_to_utc(ticks: int) -> int:
    return ticks - local_offset(ticks)
