"""Date windows, axis categories and drill-down navigation for dashboard charts."""

from .categories import generate
from .drilldown import DrillDownNavigator
from .models import (
    PERIODICITIES,
    PERIODICITY_LABELS,
    PRESETS,
    Category,
    DateInterval,
    DrillState,
    TimeRange,
    preset_label,
)
from .resolver import (
    available_periodicities,
    comparison_interval,
    comparison_label,
    default_periodicity,
    describe,
    resolve,
    select_periodicity,
)

__all__ = [
    "Category",
    "DateInterval",
    "DrillDownNavigator",
    "DrillState",
    "PERIODICITIES",
    "PERIODICITY_LABELS",
    "PRESETS",
    "TimeRange",
    "available_periodicities",
    "comparison_interval",
    "comparison_label",
    "default_periodicity",
    "describe",
    "generate",
    "preset_label",
    "resolve",
    "select_periodicity",
]
