"""Value types shared by the period resolver, category generator and navigator."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Literal, Optional, Tuple

from plantview.utils.helpers import _as_date

logger = logging.getLogger("plantview.periods")

PeriodPreset = Literal[
    "custom",
    "current-week",
    "previous-week",
    "previous-7-days",
    "current-month",
    "previous-month",
    "previous-3-months",
    "previous-12-months",
    "current-year",
    "previous-year",
]

Periodicity = Literal["daily", "weekly", "monthly"]

# Coarsest first; this is also the order offered in the periodicity dropdown.
PERIODICITIES: Tuple[str, ...] = ("monthly", "weekly", "daily")

PERIODICITY_LABELS = {"daily": "Daily", "weekly": "Weekly", "monthly": "Monthly"}

PRESETS: Tuple[Tuple[str, str], ...] = (
    ("custom", "Custom"),
    ("current-week", "Current Week"),
    ("previous-week", "Previous Week"),
    ("previous-7-days", "Previous 7 Days"),
    ("current-month", "Current Month"),
    ("previous-month", "Previous Month"),
    ("previous-3-months", "Previous 3 Months"),
    ("previous-12-months", "Previous 12 Months"),
    ("current-year", "Current Year"),
    ("previous-year", "Previous Year"),
)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def preset_label(preset: Optional[str]) -> str:
    return dict(PRESETS).get(preset or "", "Custom")


@dataclass(frozen=True)
class DateInterval:
    """Inclusive whole-day interval ``[start, end]``.

    Instances are never mutated; ``shift`` and friends return new intervals.
    An inverted interval (``end < start``) can be constructed so that bad
    upstream state stays representable, but ``is_valid`` reports it and the
    category generator renders it as an empty axis.
    """

    start: date
    end: date

    @classmethod
    def parse(cls, start, end) -> Optional["DateInterval"]:
        """Build an interval from dates or ISO strings, ``None`` if unusable."""
        d_start = _as_date(start)
        d_end = _as_date(end)
        if d_start is None or d_end is None:
            logger.warning("Unparsable interval bounds: %r .. %r", start, end)
            return None
        interval = cls(d_start, d_end)
        if not interval.is_valid:
            logger.warning("Inverted interval %s .. %s", d_start, d_end)
            return None
        return interval

    @property
    def is_valid(self) -> bool:
        return self.start <= self.end

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def shift(self, days: int) -> "DateInterval":
        delta = timedelta(days=days)
        return DateInterval(self.start + delta, self.end + delta)

    def display(self) -> str:
        return f"{self.start:%d %b %Y} - {self.end:%d %b %Y}"

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class TimeRange:
    """Shift window (``HH:MM``) shown next to the dates; not used for bucketing."""

    start_time: str = "06:00"
    end_time: str = "14:05"

    @classmethod
    def parse(cls, start_time, end_time, default: Optional["TimeRange"] = None) -> "TimeRange":
        fallback = default or cls()
        start = _parse_time(start_time)
        end = _parse_time(end_time)
        return cls(
            start_time=start or fallback.start_time,
            end_time=end or fallback.end_time,
        )


def _parse_time(value) -> Optional[str]:
    if not value:
        return None
    text = str(value).strip()
    if _TIME_RE.match(text):
        return text
    logger.warning("Ignoring malformed time of day %r", value)
    return None


@dataclass(frozen=True)
class Category:
    """One x-axis tick: its label and the date it stands for."""

    label: str
    date: date


@dataclass(frozen=True)
class DrillState:
    granularity: str
    interval: DateInterval
    breadcrumb: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def breadcrumb_text(self) -> str:
        return " → ".join(self.breadcrumb)

    def to_dict(self) -> dict:
        return {
            "granularity": self.granularity,
            "interval": self.interval.to_dict(),
            "breadcrumb": list(self.breadcrumb),
        }


__all__ = [
    "Category",
    "DateInterval",
    "DrillState",
    "PERIODICITIES",
    "PERIODICITY_LABELS",
    "PRESETS",
    "PeriodPreset",
    "Periodicity",
    "TimeRange",
    "preset_label",
]
