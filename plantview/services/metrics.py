"""Metrics service utilities."""

from __future__ import annotations

from typing import Dict, Optional, Union

import pandas as pd


class Metrics:
    """Encapsulate metric mapping and helper routines."""

    def __init__(self, mapping: Dict[str, str]):
        self.mapping = dict(mapping)

    def label(self, key: Optional[str]) -> str:
        if not key:
            return ""
        if key == "oee":
            return self.mapping.get(key, "OEE (A*P*Q)")
        return self.mapping.get(key, key)

    def validate(self, df: pd.DataFrame, metric: Optional[str]) -> Optional[str]:
        """``metric`` if it is a configured metric with a column in ``df``, else None."""
        if not metric or metric not in self.mapping:
            return None
        return metric if metric in getattr(df, "columns", ()) else None

    @staticmethod
    def oee(availability: float, performance: float, quality: float) -> float:
        """OEE in percent from its three factors, each given in percent."""
        return availability * performance * quality / 10000.0

    @staticmethod
    def compare(value: float, previous: Optional[float]) -> Optional[Dict[str, Union[float, bool]]]:
        """Period-over-period change; higher is better for every OEE metric."""
        if previous is None or pd.isna(previous) or value is None or pd.isna(value):
            return None
        delta = float(value) - float(previous)
        percent = abs(delta / previous * 100.0) if previous != 0 else 0.0
        is_increase = delta > 0
        return {
            "delta": round(delta, 2),
            "percent_change": round(percent, 1),
            "is_increase": is_increase,
            "is_positive": is_increase,
        }


__all__ = ["Metrics"]
