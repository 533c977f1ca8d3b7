from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def to_day(value: DateLike) -> date:
    """Normalize a date, datetime or ISO string to a calendar day (time of day dropped)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip()).date()
    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def midnight(day: date) -> datetime:
    """Start of `day` as a naive datetime."""
    return datetime.combine(day, time.min)


def format_day(day: date) -> str:
    return day.strftime("%Y-%m-%d")
