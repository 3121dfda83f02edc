from datetime import date

import pytest

from plantview.periods import DateInterval, TimeRange, preset_label
from plantview.utils.filter_params import FilterParams, build_params


def test_interval_properties():
    interval = DateInterval(date(2024, 3, 10), date(2024, 3, 15))
    assert interval.days == 6
    assert interval.contains(date(2024, 3, 15))
    assert not interval.contains(date(2024, 3, 16))
    assert interval.shift(-7) == DateInterval(date(2024, 3, 3), date(2024, 3, 8))
    assert interval.display() == "10 Mar 2024 - 15 Mar 2024"


def test_interval_parse():
    assert DateInterval.parse("2024-03-01", "2024-03-05") == DateInterval(date(2024, 3, 1), date(2024, 3, 5))
    assert DateInterval.parse("2024-03-05", "2024-03-01") is None
    assert DateInterval.parse("not a date", "2024-03-01") is None
    assert DateInterval.parse("", None) is None


def test_time_range_parse_keeps_valid_values_only():
    tr = TimeRange.parse("25:00", "18:30")
    assert tr == TimeRange("06:00", "18:30")
    assert TimeRange.parse("07:15", "", default=TimeRange("05:00", "13:00")) == TimeRange("07:15", "13:00")


def test_preset_label():
    assert preset_label("previous-3-months") == "Previous 3 Months"
    assert preset_label("nope") == "Custom"


def test_from_preset(today):
    params = FilterParams.from_preset("previous-month", today)
    assert params.preset == "previous-month"
    assert params.interval() == DateInterval(date(2024, 2, 1), date(2024, 2, 29))
    assert params.periodicity == "weekly"


def test_from_unknown_preset_uses_default(today, monkeypatch):
    monkeypatch.setattr("plantview.config.Config.DEFAULT_PRESET", "current-month")
    params = FilterParams.from_preset("bogus", today)
    assert params.preset == "current-month"
    assert params.interval() == DateInterval(date(2024, 3, 1), date(2024, 3, 15))


def test_with_dates_switches_to_custom(today):
    params = FilterParams.from_preset("previous-12-months", today)
    assert params.periodicity == "monthly"
    edited = params.with_dates(date(2024, 3, 1), date(2024, 3, 5))
    assert edited.preset == "custom"
    assert edited.interval() == DateInterval(date(2024, 3, 1), date(2024, 3, 5))
    assert edited.periodicity == "daily"


def test_apply_filters_selections_and_whole_days(events):
    params = FilterParams(
        start=date(2024, 3, 11),
        end=date(2024, 3, 12),
        selections={"machine": ["M-01", "M-03"]},
    )
    out = params.apply(events, "timestamp")
    assert sorted(out["production"].tolist()) == [50, 90, 110]


def test_apply_ignores_unknown_columns(events):
    params = FilterParams(selections={"line": ["L1"]})
    assert len(params.apply(events, "timestamp")) == len(events)


def test_build_params_custom_dates(today):
    params = build_params({"start_date": "2024-03-01", "end_date": "2024-03-20"}, today)
    assert params.preset == "custom"
    assert params.interval() == DateInterval(date(2024, 3, 1), date(2024, 3, 20))
    assert params.periodicity == "weekly"


def test_build_params_is_case_insensitive(today):
    params = build_params({"PRESET": "Previous-Month", "Machine": ["M-01", ""]}, today)
    assert params.preset == "previous-month"
    assert params.selections == {"machine": ["M-01"]}


def test_build_params_respects_available_periodicity(today):
    params = build_params({"preset": "previous-year", "periodicity": "daily"}, today)
    assert params.periodicity == "daily"
    params = build_params({"preset": "current-week", "periodicity": "monthly"}, today)
    assert params.periodicity == "daily"


@pytest.mark.parametrize(
    "args",
    [
        {"start_date": "2024-03-20", "end_date": "2024-03-01"},
        {"preset": "custom"},
        {"preset": "yesterday"},
        {},
    ],
)
def test_build_params_falls_back_to_default_preset(today, monkeypatch, args):
    monkeypatch.setattr("plantview.config.Config.DEFAULT_PRESET", "current-week")
    params = build_params(args, today)
    assert params.preset == "current-week"
    assert params.interval() == DateInterval(date(2024, 3, 10), date(2024, 3, 15))


def test_build_params_time_range(today):
    params = build_params({"preset": "current-week", "start_time": "22:00", "end_time": "6am"}, today)
    assert params.time_range.start_time == "22:00"
    assert params.time_range.end_time == "14:05"


def test_to_dict(today):
    out = FilterParams.from_preset("current-week", today, selections={"plant": ["P1"]}).to_dict()
    assert out["start_date"] == "2024-03-10"
    assert out["end_date"] == "2024-03-15"
    assert out["selections"] == {"plant": ["P1"]}


def test_refreshed_re_resolves_named_presets(today):
    params = FilterParams.from_preset("current-month", today, selections={"plant": ["P1"]})
    assert params.resolved_on == today
    assert params.refreshed(today) is params

    later = params.refreshed(date(2024, 4, 2))
    assert later.interval() == DateInterval(date(2024, 4, 1), date(2024, 4, 2))
    assert later.selections == {"plant": ["P1"]}

    custom = params.with_dates(date(2024, 3, 1), date(2024, 3, 5))
    assert custom.refreshed(date(2024, 4, 2)) is custom


def test_build_params_with_explicit_defaults(today):
    params = build_params(
        {"start_date": "not a date"},
        today,
        default_preset="previous-year",
        default_time_range=TimeRange("22:00", "06:00"),
    )
    assert params.preset == "previous-year"
    assert params.time_range == TimeRange("22:00", "06:00")
