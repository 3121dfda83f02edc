"""Preset-driven date windows, comparison periods and periodicity choice."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional

from plantview.config import Config
from plantview.periods.models import PERIODICITIES, DateInterval, preset_label
from plantview.utils.helpers import (
    add_months,
    start_of_month,
    start_of_week,
    start_of_year,
)

logger = logging.getLogger("plantview.periods")

ONE_DAY = timedelta(days=1)

COMPARISON_LABELS: Dict[str, str] = {
    "current-week": "vs Previous Week",
    "previous-week": "vs Week Before",
    "previous-7-days": "vs Previous 7 Days",
    "current-month": "vs Previous Month",
    "previous-month": "vs Month Before",
    "previous-3-months": "vs Previous 3 Months",
    "previous-12-months": "vs Previous 12 Months",
    "current-year": "vs Previous Year",
    "previous-year": "vs Year Before",
}

# Presets whose prior period is a run of whole calendar months.
_MONTH_SPANS: Dict[str, int] = {
    "current-month": 1,
    "previous-month": 1,
    "previous-3-months": 3,
    "previous-12-months": 12,
}


def _previous_months(today: date, months: int) -> DateInterval:
    """The ``months`` full calendar months before the month holding ``today``."""
    this_month = start_of_month(today)
    return DateInterval(add_months(this_month, -months), this_month - ONE_DAY)


def resolve(preset: Optional[str], today: date) -> Optional[DateInterval]:
    """
    Compute the absolute interval a named preset stands for on ``today``.

    Weeks start on Sunday. ``custom`` returns ``None``: its bounds come from
    the caller, not from the calendar. Unknown presets also return ``None``
    (and log a warning) so the caller keeps whatever interval it had.
    """
    if preset == "custom":
        return None

    if preset == "current-week":
        return DateInterval(start_of_week(today), today)
    if preset == "previous-week":
        prev_end = start_of_week(today) - ONE_DAY
        return DateInterval(start_of_week(prev_end), prev_end)
    if preset == "previous-7-days":
        return DateInterval(today - timedelta(days=7), today - ONE_DAY)
    if preset == "current-month":
        return DateInterval(start_of_month(today), today)
    if preset == "previous-month":
        return _previous_months(today, 1)
    if preset == "previous-3-months":
        return _previous_months(today, 3)
    if preset == "previous-12-months":
        return _previous_months(today, 12)
    if preset == "current-year":
        return DateInterval(start_of_year(today), today)
    if preset == "previous-year":
        prev_end = start_of_year(today) - ONE_DAY
        return DateInterval(start_of_year(prev_end), prev_end)

    logger.warning("Unknown period preset %r", preset)
    return None


def _preceding(interval: DateInterval) -> DateInterval:
    prev_end = interval.start - ONE_DAY
    return DateInterval(prev_end - timedelta(days=interval.days - 1), prev_end)


def comparison_interval(preset: Optional[str], interval: DateInterval) -> Optional[DateInterval]:
    """
    Period the current figures are compared against.

    Named presets compare with the matching earlier period in full: the
    whole week before, the whole month(s) before, the whole year before,
    even when ``interval`` itself is a partial "current" period. ``custom``
    and anything unknown fall back to the same-length run of days ending
    the day before ``interval.start``.
    """
    if not interval.is_valid:
        logger.warning("No comparison period for inverted interval %s", interval)
        return None

    if preset in ("current-week", "previous-week"):
        week_start = start_of_week(interval.start)
        return DateInterval(week_start - timedelta(days=7), week_start - ONE_DAY)
    if preset == "previous-7-days":
        return interval.shift(-7)
    if preset in _MONTH_SPANS:
        month_start = start_of_month(interval.start)
        return DateInterval(
            add_months(month_start, -_MONTH_SPANS[preset]),
            month_start - ONE_DAY,
        )
    if preset in ("current-year", "previous-year"):
        prev_end = start_of_year(interval.start) - ONE_DAY
        return DateInterval(start_of_year(prev_end), prev_end)

    return _preceding(interval)


def comparison_label(preset: Optional[str], interval: Optional[DateInterval] = None) -> str:
    if preset in COMPARISON_LABELS:
        return COMPARISON_LABELS[preset]
    if interval is not None and interval.is_valid:
        prev = _preceding(interval)
        return f"vs {prev.start:%b %d} - {prev.end:%b %d}"
    return "vs Previous Period"


# -------- periodicity --------

def _thresholds(thresholds: Optional[Mapping[str, Mapping[str, int]]]) -> Mapping[str, Mapping[str, int]]:
    return thresholds or Config.PERIODICITY_THRESHOLDS


def available_periodicities(
    interval: DateInterval,
    thresholds: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> List[str]:
    """Periodicities that make sense for ``interval``, coarsest first."""
    limits = _thresholds(thresholds)["available"]
    days = interval.days
    if days >= limits["monthly"]:
        return list(PERIODICITIES)
    if days >= limits["weekly"]:
        return ["weekly", "daily"]
    return ["daily"]


def default_periodicity(
    interval: DateInterval,
    thresholds: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> str:
    limits = _thresholds(thresholds)
    days = interval.days
    if days >= limits["default"]["monthly"]:
        preferred = "monthly"
    elif days >= limits["default"]["weekly"]:
        preferred = "weekly"
    else:
        preferred = "daily"

    options = available_periodicities(interval, limits)
    return preferred if preferred in options else options[0]


def select_periodicity(
    interval: DateInterval,
    previous: Optional[str] = None,
    thresholds: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> str:
    """Keep ``previous`` if the new interval still allows it, else the default."""
    if previous in available_periodicities(interval, thresholds):
        return previous
    return default_periodicity(interval, thresholds)


def describe(
    preset: Optional[str],
    interval: DateInterval,
    thresholds: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> Dict[str, object]:
    """Everything the filter bar needs to render one applied interval."""
    comparison = comparison_interval(preset, interval)
    return {
        "preset": preset or "custom",
        "preset_label": preset_label(preset),
        "interval": interval.to_dict(),
        "display": interval.display(),
        "days": interval.days,
        "periodicities": available_periodicities(interval, thresholds),
        "default_periodicity": default_periodicity(interval, thresholds),
        "comparison": comparison.to_dict() if comparison else None,
        "comparison_label": comparison_label(preset, interval),
    }


__all__ = [
    "COMPARISON_LABELS",
    "available_periodicities",
    "comparison_interval",
    "comparison_label",
    "default_periodicity",
    "describe",
    "resolve",
    "select_periodicity",
]
