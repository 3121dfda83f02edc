"""Application configuration objects."""

import os
import sys
from typing import Dict, List, Tuple
from dotenv import load_dotenv

if getattr(sys, "frozen", False):
    load_dotenv(os.path.join(sys._MEIPASS, ".env"))
else:
    load_dotenv()


class Config:
    """Base configuration for the plant performance dashboard."""

    # -------------------------
    # Data paths
    # -------------------------
    # Machine event export (one row per machine event / shift record)
    EVENTS_CSV = os.getenv("PLANTVIEW_EVENTS_CSV", "data/machine_events.csv")

    # -------------------------
    # Data schema
    # -------------------------
    DATE_COL = os.getenv("PLANTVIEW_DATE_COL", "timestamp")

    # Filterable columns (plant -> machine -> mould)
    SELECTION_COLS = ("plant", "machine", "mould")

    # -------------------------
    # Clock
    # -------------------------
    # IANA zone name used to decide what "today" is; local time when unset
    TIMEZONE = os.getenv("PLANTVIEW_TZ") or None

    # -------------------------
    # Date range picker defaults
    # -------------------------
    DEFAULT_PRESET = os.getenv("PLANTVIEW_DEFAULT_PRESET", "current-week")
    DEFAULT_START_TIME = os.getenv("PLANTVIEW_START_TIME", "06:00")
    DEFAULT_END_TIME = os.getenv("PLANTVIEW_END_TIME", "14:05")

    # -------------------------
    # Centralized metrics & frequency config
    # -------------------------
    METRICS: Dict[str, str] = {
        "availability": "Availability",
        "performance": "Performance",
        "quality": "Quality",
        "production": "Production",
        "rejection": "Rejection",
    }

    FREQ_RULE: Dict[str, str] = {
        "daily": "D",
        "weekly": "W-SUN",  # weekly anchored to Sunday
        "monthly": "MS",
    }

    # Interval length (inclusive days) at which a periodicity becomes
    # selectable, and at which it becomes the default.
    PERIODICITY_THRESHOLDS: Dict[str, Dict[str, int]] = {
        "available": {"weekly": 7, "monthly": 30},
        "default": {"weekly": 14, "monthly": 60},
    }

    # chart name -> (metric keys, aggregation)
    CHARTS: Dict[str, Tuple[List[str], str]] = {
        "oee_breakdown": (["availability", "performance", "quality"], "mean"),
        "production_vs_rejection": (["production", "rejection"], "sum"),
    }

    GAUGE_METRICS: List[str] = ["oee", "availability", "performance", "quality"]


__all__ = ["Config"]
