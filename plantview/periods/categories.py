"""Chart x-axis categories for a date interval at a given periodicity."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional

import pandas as pd

from plantview.config import Config
from plantview.periods.models import Category, DateInterval
from plantview.utils.helpers import start_of_month, start_of_week, week_of_month

logger = logging.getLogger("plantview.periods")


def day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def week_label(day: date) -> str:
    """``"Mar W2"``: month of ``day`` plus its week-of-month number."""
    return f"{day:%b} W{week_of_month(day)}"


def month_label(day: date) -> str:
    return f"{day:%b}"


_LABELLERS: Dict[str, Callable[[date], str]] = {
    "daily": day_label,
    "weekly": week_label,
    "monthly": month_label,
}

# First tick of each axis: the bucket holding interval.start, which for
# weeks and months can begin before the interval does.
_ANCHORS: Dict[str, Callable[[date], date]] = {
    "daily": lambda d: d,
    "weekly": start_of_week,
    "monthly": start_of_month,
}


def anchor(day: date, granularity: str) -> Optional[date]:
    """Date of the bucket ``day`` falls into, ``None`` for an unknown granularity."""
    fn = _ANCHORS.get(granularity)
    return fn(day) if fn else None


def generate(
    interval: Optional[DateInterval],
    granularity: Optional[str],
    freq_rule: Optional[Mapping[str, str]] = None,
) -> List[Category]:
    """
    Ordered axis categories covering ``interval``.

    - daily: every day, ``"Mar 5"``
    - weekly: every Sunday-started week touching the interval, ``"Mar W2"``
    - monthly: every calendar month touching the interval, ``"Mar"``

    Unknown granularities and inverted intervals give an empty list so the
    chart can still render (empty).
    """
    rules = freq_rule or Config.FREQ_RULE
    if granularity not in _LABELLERS or granularity not in rules:
        logger.warning("Unsupported granularity %r; no categories", granularity)
        return []
    if interval is None or not interval.is_valid:
        logger.warning("Degenerate interval %r; no categories", interval)
        return []

    first = _ANCHORS[granularity](interval.start)
    ticks = pd.date_range(
        start=pd.Timestamp(first), end=pd.Timestamp(interval.end), freq=rules[granularity]
    )

    label = _LABELLERS[granularity]
    return [Category(label(ts.date()), ts.date()) for ts in ticks]


__all__ = ["anchor", "day_label", "generate", "month_label", "week_label"]
