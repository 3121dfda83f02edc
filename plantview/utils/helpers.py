"""Shared date helpers."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd


def _parse_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        parsed = pd.to_datetime(value, errors="coerce")
        return parsed.date() if pd.notna(parsed) else None


def _as_date(value) -> Optional[date]:
    """Accept ``date``, ``datetime``, ``pd.Timestamp`` or a string."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return _parse_date(str(value))


# -------- calendar arithmetic (weeks start on Sunday) --------

def start_of_week(day: date) -> date:
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def start_of_year(day: date) -> date:
    return date(day.year, 1, 1)


def week_of_month(day: date) -> int:
    """1-based index of ``day``'s Sunday week within its own month.

    Counted from the Sunday-aligned week holding the 1st, so the 1st is
    always in W1 and a month can reach W6.
    """
    first_week = start_of_week(start_of_month(day))
    return (start_of_week(day) - first_week).days // 7 + 1


__all__ = [
    "_as_date",
    "_parse_date",
    "add_months",
    "end_of_month",
    "end_of_week",
    "start_of_month",
    "start_of_week",
    "start_of_year",
    "week_of_month",
]
