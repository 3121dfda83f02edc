"""Aggregate event rows onto chart categories."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from plantview.periods.models import Category

logger = logging.getLogger("plantview")

_AGGREGATIONS = ("sum", "mean")


def bucket_dates(dates: pd.Series, granularity: str) -> pd.Series:
    """Map timestamps to the date of their daily / Sunday-week / monthly bucket."""
    days = pd.to_datetime(dates, errors="coerce").dt.normalize()
    if granularity == "weekly":
        # dt.dayofweek: Monday == 0 ... Sunday == 6
        return days - pd.to_timedelta((days.dt.dayofweek + 1) % 7, unit="D")
    if granularity == "monthly":
        return days - pd.to_timedelta(days.dt.day - 1, unit="D")
    return days


def bucket_series(
    df: pd.DataFrame,
    date_col: str,
    metrics: Iterable[str],
    categories: Sequence[Category],
    granularity: str,
    how: str = "sum",
) -> Dict[str, List[float]]:
    """
    One list of values per metric, aligned with ``categories``.

    Buckets without rows (or metrics missing from ``df``) read as 0 so the
    series always has exactly ``len(categories)`` points.
    """
    metrics = list(metrics)
    empty = {m: [0.0] * len(categories) for m in metrics}
    if not categories:
        return {m: [] for m in metrics}
    if how not in _AGGREGATIONS:
        logger.warning("Unknown aggregation %r; using sum", how)
        how = "sum"
    if df is None or df.empty or date_col not in df.columns:
        return empty

    present = [m for m in metrics if m in df.columns]
    if not present:
        return empty

    frame = df[present].apply(pd.to_numeric, errors="coerce")
    buckets = bucket_dates(df[date_col], granularity)
    frame = frame[buckets.notna()].copy()
    frame["bucket"] = buckets[buckets.notna()].dt.date

    grouped = frame.groupby("bucket")[present].agg(how)
    grouped = grouped.reindex([c.date for c in categories]).fillna(0.0)

    out = dict(empty)
    for m in present:
        out[m] = [float(v) for v in grouped[m]]
    return out


__all__ = ["bucket_dates", "bucket_series"]
