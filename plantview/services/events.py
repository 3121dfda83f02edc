"""Machine event loading, preprocessing and in-memory caching."""

from __future__ import annotations
import logging
import os
from typing import Any, List, Mapping, Optional, Tuple
import pandas as pd

from plantview.services.metrics import Metrics

logger = logging.getLogger("plantview.events")


class EventStore:
    """Own event loading, preprocessing, and in-memory caching.

    Source data: one CSV export matched by Config.EVENTS_CSV, or a frame
    handed over with ``set_df``. Nothing is written back anywhere.
    """

    def __init__(self, config: Mapping[str, Any], metrics: Metrics):
        self.config = config
        self.metrics = metrics
        self._df: Optional[pd.DataFrame] = None

    @property
    def date_col(self) -> str:
        return self.config.get("DATE_COL", "timestamp")

    def _preprocess(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.drop_duplicates().reset_index(drop=True)

        date_col = self.date_col
        if date_col in df.columns:
            parsed = pd.to_datetime(df[date_col], errors="coerce")
            if getattr(parsed.dt, "tz", None) is not None:
                parsed = parsed.dt.tz_localize(None)
            dropped = int(parsed.isna().sum())
            if dropped:
                logger.warning("Dropping %d event(s) with unparsable %s", dropped, date_col)
            df[date_col] = parsed
            df = df[parsed.notna()].reset_index(drop=True)
        else:
            logger.warning("Event data has no %r column", date_col)

        for numcol in self.metrics.mapping.keys():
            if numcol in df.columns:
                df[numcol] = pd.to_numeric(df[numcol], errors="coerce")

        for col in self.config.get("SELECTION_COLS", ()):
            if col in df.columns:
                df[col] = df[col].astype(str)

        return df

    def load(self) -> pd.DataFrame:
        if self._df is not None:
            return self._df

        path = str(self.config.get("EVENTS_CSV") or "")
        if not path or not os.path.exists(path):
            logger.warning("No event export found at %s; starting empty", path or "<unset>")
            self._df = pd.DataFrame()
            return self._df

        try:
            raw = pd.read_csv(path)
        except (OSError, ValueError) as e:
            logger.error("Failed to read event export %s: %s", path, e)
            self._df = pd.DataFrame()
            return self._df

        logger.info("Loaded %d event row(s) from %s", len(raw), path)
        self._df = self._preprocess(raw)
        return self._df

    def set_df(self, df: pd.DataFrame) -> None:
        self._df = self._preprocess(df)
        logger.info("EventStore loaded from in-memory frame (%d rows).", len(self._df))

    def get(self, copy: bool = True) -> pd.DataFrame:
        df = self.load()
        return df.copy(deep=False) if copy else df

    def reload(self) -> None:
        self._df = None
        logger.info("EventStore cache cleared")

    def date_bounds(self) -> Tuple[str, str]:
        df = self.get(copy=False)
        if self.date_col not in df.columns or len(df) == 0:
            return "", ""
        dmin = df[self.date_col].min()
        dmax = df[self.date_col].max()
        start = dmin.date().isoformat() if pd.notna(dmin) else ""
        end = dmax.date().isoformat() if pd.notna(dmax) else ""
        return start, end

    def unique_values(self, column: str, max_uniques: int = 200) -> List[str]:
        df = self.get(copy=False)
        if column not in df.columns:
            return []
        values = pd.Series(df[column].dropna().unique()).astype(str).tolist()
        return sorted(set(values))[:max_uniques]


__all__ = ["EventStore"]
