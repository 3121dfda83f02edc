"""Dashboard factory and state owner for the plant performance dashboard."""

from __future__ import annotations

import logging

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("plantview")

from .config import Config
from .periods import DrillDownNavigator, comparison_interval, comparison_label, describe
from .periods.models import PERIODICITY_LABELS, TimeRange
from .periods.resolver import available_periodicities
from .services.events import EventStore
from .services.metrics import Metrics
from .services.series import bucket_series
from .utils.filter_params import FilterParams, build_params


def _config_mapping(config_object) -> Dict[str, Any]:
    """Uppercase attributes of a class/object, or a mapping layered over ``Config``."""
    if config_object is None:
        config_object = Config
    if isinstance(config_object, Mapping):
        base = {k: getattr(Config, k) for k in dir(Config) if k.isupper()}
        base.update(config_object)
        return base
    return {k: getattr(config_object, k) for k in dir(config_object) if k.isupper()}


class Chart:
    """One drillable time-series chart fed from the event store."""

    def __init__(self, dashboard: "Dashboard", name: str, metrics: Iterable[str], how: str = "sum"):
        self.dashboard = dashboard
        self.name = name
        self.metric_keys = list(metrics)
        self.how = how
        params = dashboard.current_filters()
        self.navigator = DrillDownNavigator(
            params.interval(),
            params.periodicity,
            dashboard.refresh_key,
            freq_rule=dashboard.config.get("FREQ_RULE"),
        )

    def sync(self) -> bool:
        params = self.dashboard.current_filters()
        return self.navigator.sync(params.interval(), params.periodicity, self.dashboard.refresh_key)

    def drill_down(self, index: int) -> bool:
        self.sync()
        return self.navigator.drill_down(index)

    def back(self) -> bool:
        self.sync()
        return self.navigator.back()

    def payload(self) -> Dict[str, Any]:
        self.sync()
        state = self.navigator.current()
        categories = self.navigator.categories()
        metrics = self.dashboard.metrics

        values = {m: [] for m in self.metric_keys}
        if state is not None and categories:
            frame = self.dashboard.events_for(state.interval)
            values = bucket_series(
                frame,
                self.dashboard.config["DATE_COL"],
                self.metric_keys,
                categories,
                state.granularity,
                how=self.how,
            )

        return {
            "chart": self.name,
            "labels": [c.label for c in categories],
            "values": values,
            "metric_labels": {m: metrics.label(m) for m in self.metric_keys},
            "granularity": state.granularity if state else None,
            "interval": state.interval.to_dict() if state else None,
            "breadcrumb": list(state.breadcrumb) if state else [],
            "breadcrumb_text": state.breadcrumb_text if state else "",
            "can_drill_down": self.navigator.can_drill_down,
            "can_go_back": self.navigator.can_go_back,
        }


class Dashboard:
    """Filter state, previous-filter history and the charts that follow them."""

    def __init__(self, config: Mapping[str, Any], metrics: Metrics, events: EventStore):
        self.config = config
        self.metrics = metrics
        self.events = events
        self.refresh_key = 0
        self.previous_filters: Optional[FilterParams] = None
        self.filters = FilterParams.from_preset(
            config["DEFAULT_PRESET"],
            self.today(),
            time_range=self.default_time_range,
            default_preset=config["DEFAULT_PRESET"],
            thresholds=self.thresholds,
        )
        self.charts: Dict[str, Chart] = {}
        for name, (metric_keys, how) in config["CHARTS"].items():
            self.add_chart(name, metric_keys, how)

    # -------- config --------

    @property
    def thresholds(self) -> Mapping[str, Mapping[str, int]]:
        return self.config["PERIODICITY_THRESHOLDS"]

    @property
    def default_time_range(self) -> TimeRange:
        return TimeRange.parse(self.config["DEFAULT_START_TIME"], self.config["DEFAULT_END_TIME"])

    # -------- clock --------

    def today(self) -> date:
        """Calendar date on the plant clock; read fresh on every call."""
        return pd.Timestamp.now(tz=self.config.get("TIMEZONE")).date()

    # -------- filters --------

    def current_filters(self) -> FilterParams:
        """Applied filters, with a named preset re-resolved when the day has changed."""
        today = self.today()
        refreshed = self.filters.refreshed(
            today, default_preset=self.config["DEFAULT_PRESET"], thresholds=self.thresholds
        )
        if refreshed is not self.filters:
            logger.info("Preset %s re-resolved for %s", refreshed.preset, today.isoformat())
            self.filters = refreshed
        return self.filters

    def apply_filters(self, params: FilterParams) -> FilterParams:
        self.previous_filters = self.filters
        self.filters = params
        self.refresh_key += 1
        logger.info(
            "Filters applied: %s %s (%s)",
            params.preset,
            params.interval().display() if params.interval() else "-",
            params.periodicity,
        )
        return self.filters

    def apply_args(self, args: Mapping) -> FilterParams:
        params = build_params(
            args,
            self.today(),
            self.config.get("SELECTION_COLS"),
            default_preset=self.config["DEFAULT_PRESET"],
            default_time_range=self.default_time_range,
            thresholds=self.thresholds,
        )
        return self.apply_filters(params)

    def set_periodicity(self, periodicity: str) -> FilterParams:
        """Change bucket size immediately, keeping the applied interval and preset."""
        params = self.current_filters()
        interval = params.interval()
        if interval is None or periodicity not in available_periodicities(interval, self.thresholds):
            logger.warning("Periodicity %r not available for %s", periodicity, interval)
            return params
        return self.apply_filters(params.with_periodicity(periodicity))

    def restore_previous(self) -> bool:
        if self.previous_filters is None:
            return False
        self.filters = self.previous_filters
        self.refresh_key += 1
        return True

    def filter_state(self) -> Dict[str, Any]:
        params = self.current_filters()
        interval = params.interval()
        state = params.to_dict()
        if interval is not None:
            state.update(describe(params.preset, interval, self.thresholds))
        state["periodicity_options"] = [
            {"value": p, "label": PERIODICITY_LABELS[p]}
            for p in (available_periodicities(interval, self.thresholds) if interval else ["daily"])
        ]
        state["has_previous"] = self.previous_filters is not None
        return state

    # -------- data --------

    def events_for(self, interval) -> pd.DataFrame:
        """Event rows for the current selections within ``interval``."""
        scoped = FilterParams(
            start=interval.start,
            end=interval.end,
            selections=self.filters.selections,
        )
        return scoped.apply(self.events.get(copy=False), self.config["DATE_COL"])

    # -------- charts --------

    def add_chart(self, name: str, metric_keys: Iterable[str], how: str = "sum") -> Chart:
        chart = Chart(self, name, metric_keys, how)
        self.charts[name] = chart
        return chart

    def chart(self, name: str) -> Optional[Chart]:
        return self.charts.get(name)

    def _means(self, interval) -> Dict[str, Optional[float]]:
        frame = self.events_for(interval) if interval is not None else pd.DataFrame()
        out: Dict[str, Optional[float]] = {}
        for key in ("availability", "performance", "quality"):
            if self.metrics.validate(frame, key) and frame[key].notna().any():
                out[key] = float(frame[key].mean())
            else:
                out[key] = None
        if all(out[k] is not None for k in ("availability", "performance", "quality")):
            out["oee"] = self.metrics.oee(out["availability"], out["performance"], out["quality"])
        else:
            out["oee"] = None
        return out

    def gauges(self) -> List[Dict[str, Any]]:
        """Current vs comparison-period value for each gauge metric."""
        params = self.current_filters()
        interval = params.interval()
        if interval is None:
            return []
        previous = comparison_interval(params.preset, interval)
        label = comparison_label(params.preset, interval)

        current_values = self._means(interval)
        previous_values = self._means(previous)

        gauges = []
        for key in self.config["GAUGE_METRICS"]:
            value = current_values.get(key)
            prev = previous_values.get(key)
            gauges.append(
                {
                    "metric": key,
                    "title": self.metrics.label(key),
                    "value": round(value, 2) if value is not None else None,
                    "previous_value": round(prev, 2) if prev is not None else None,
                    "comparison": self.metrics.compare(value, prev),
                    "period_label": label,
                }
            )
        return gauges


def create_dashboard(
    config_object: Optional[Union[Mapping[str, Any], type]] = None,
    events: Optional[pd.DataFrame] = None,
) -> Dashboard:
    """Create and configure a dashboard."""
    config = _config_mapping(config_object)

    metrics = Metrics(config["METRICS"])
    store = EventStore(config, metrics)
    if events is not None:
        store.set_df(events)

    return Dashboard(config, metrics, store)


__all__ = ["Chart", "Dashboard", "create_dashboard"]
