# filter_params.py
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from plantview.config import Config
from plantview.periods.models import PRESETS, DateInterval, TimeRange
from plantview.periods.resolver import resolve, select_periodicity

_PRESET_VALUES = {value for value, _ in PRESETS}

Thresholds = Mapping[str, Mapping[str, int]]


def _default_time_range() -> TimeRange:
    return TimeRange(Config.DEFAULT_START_TIME, Config.DEFAULT_END_TIME)


@dataclass(frozen=True)
class FilterParams:
    preset: str = "custom"
    start: Optional[date] = None
    end: Optional[date] = None
    time_range: TimeRange = field(default_factory=TimeRange)
    periodicity: str = "daily"
    selections: Dict[str, List[str]] = field(default_factory=dict)
    # calendar day a named preset was resolved on; None for custom ranges
    resolved_on: Optional[date] = None

    @classmethod
    def from_preset(
        cls,
        preset: str,
        today: date,
        time_range: Optional[TimeRange] = None,
        periodicity: Optional[str] = None,
        selections: Optional[Dict[str, List[str]]] = None,
        default_preset: Optional[str] = None,
        thresholds: Optional[Thresholds] = None,
    ) -> "FilterParams":
        """Resolve ``preset`` on ``today``; unknown presets fall back to the configured default."""
        interval = None
        for candidate in (preset, default_preset or Config.DEFAULT_PRESET, "current-week"):
            interval = resolve(candidate, today)
            if interval is not None:
                preset = candidate
                break
        return cls(
            preset=preset,
            start=interval.start,
            end=interval.end,
            time_range=time_range or _default_time_range(),
            periodicity=select_periodicity(interval, periodicity, thresholds),
            selections=dict(selections or {}),
            resolved_on=today,
        )

    # -------- derived --------
    def interval(self) -> Optional[DateInterval]:
        if self.start is None or self.end is None:
            return None
        return DateInterval(self.start, self.end)

    def refreshed(
        self,
        today: date,
        default_preset: Optional[str] = None,
        thresholds: Optional[Thresholds] = None,
    ) -> "FilterParams":
        """Re-resolve a named preset once ``today`` is past the day it was resolved on."""
        if self.preset == "custom" or self.resolved_on == today:
            return self
        return FilterParams.from_preset(
            self.preset,
            today,
            time_range=self.time_range,
            periodicity=self.periodicity,
            selections=self.selections,
            default_preset=default_preset,
            thresholds=thresholds,
        )

    def with_dates(self, start: date, end: date, thresholds: Optional[Thresholds] = None) -> "FilterParams":
        """Manual date edit: switches the preset to ``custom``."""
        interval = DateInterval(start, end)
        return replace(
            self,
            preset="custom",
            start=start,
            end=end,
            periodicity=select_periodicity(interval, self.periodicity, thresholds),
            resolved_on=None,
        )

    def with_periodicity(self, periodicity: str) -> "FilterParams":
        return replace(self, periodicity=periodicity)

    # -------- pandas path --------
    def apply(self, df: pd.DataFrame, date_col: str) -> pd.DataFrame:
        """
        Return a filtered dataframe based on the stored parameters (pandas).

        Applies INTERSECTION (AND) across:
          - All categorical selections (plant, machine, mould)
          - Date range [start, end] inclusive, whole days

        Handles dtype mismatches by comparing categorical columns as strings.
        The shift time range is display-only and is not applied here.
        """
        out = df

        normalized: Dict[str, List[str]] = {
            col: [str(v) for v in vals if v not in (None, "")]
            for col, vals in (self.selections or {}).items()
            if vals
        }

        for col, vals in normalized.items():
            if col in out.columns and vals:
                out = out[out[col].astype(str).isin(vals)]

        if date_col in out.columns:
            days = pd.to_datetime(out[date_col], errors="coerce").dt.normalize()
            mask = pd.Series(True, index=out.index)
            if self.start is not None:
                mask &= days >= pd.Timestamp(self.start)
            if self.end is not None:
                mask &= days <= pd.Timestamp(self.end)
            out = out[mask]

        return out

    def to_dict(self) -> dict:
        return {
            "preset": self.preset,
            "start_date": self.start.isoformat() if self.start else "",
            "end_date": self.end.isoformat() if self.end else "",
            "start_time": self.time_range.start_time,
            "end_time": self.time_range.end_time,
            "periodicity": self.periodicity,
            "selections": {k: list(v) for k, v in self.selections.items()},
        }


def _getlist(args: Mapping, key: str) -> List[str]:
    if hasattr(args, "getlist"):
        return list(args.getlist(key))
    value = args.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def build_params(
    args: Mapping,
    today: date,
    selection_cols: Optional[Iterable[str]] = None,
    default_preset: Optional[str] = None,
    default_time_range: Optional[TimeRange] = None,
    thresholds: Optional[Thresholds] = None,
) -> FilterParams:
    """Build ``FilterParams`` from request-style args with case-insensitive keys.

    A named preset wins over explicit dates; explicit dates without a
    preset mean ``custom``. Anything unusable falls back to the configured
    default preset rather than failing. The ``default_*`` and ``thresholds``
    arguments override the ``Config`` class values.
    """
    args_lc = {str(k).lower(): k for k in args.keys()}
    default_preset = default_preset or Config.DEFAULT_PRESET

    def get(key: str) -> str:
        real = args_lc.get(key)
        return str(args.get(real) or "").strip() if real is not None else ""

    selections: Dict[str, List[str]] = {}
    for column in selection_cols or Config.SELECTION_COLS:
        real = args_lc.get(str(column).lower())
        if real is None:
            continue
        values = [v for v in _getlist(args, real) if v not in (None, "")]
        if values:
            selections[column] = values

    time_range = TimeRange.parse(
        get("start_time"),
        get("end_time"),
        default=default_time_range or _default_time_range(),
    )
    periodicity = get("periodicity").lower() or None

    preset = get("preset").lower()
    if preset not in _PRESET_VALUES:
        preset = "custom" if (get("start_date") or get("end_date")) else default_preset

    if preset == "custom":
        interval = DateInterval.parse(get("start_date"), get("end_date"))
        if interval is not None:
            return FilterParams(
                preset="custom",
                start=interval.start,
                end=interval.end,
                time_range=time_range,
                periodicity=select_periodicity(interval, periodicity, thresholds),
                selections=selections,
            )
        preset = default_preset

    return FilterParams.from_preset(
        preset,
        today,
        time_range=time_range,
        periodicity=periodicity,
        selections=selections,
        default_preset=default_preset,
        thresholds=thresholds,
    )


__all__ = ["FilterParams", "build_params"]
