"""Shared fixtures: a fixed calendar day and a small machine-event frame."""

from datetime import date

import pandas as pd
import pytest

from plantview.dashboard import Dashboard, create_dashboard

# Friday
TODAY = date(2024, 3, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def events():
    rows = [
        ("2024-03-04 08:00", "P1", "M-01", "X", 80, 50, 90, 100, 5),
        ("2024-03-05 09:00", "P1", "M-02", "Y", 70, 60, 95, 120, 6),
        ("2024-03-11 10:00", "P1", "M-01", "X", 90, 40, 92, 110, 4),
        ("2024-03-12 11:00", "P1", "M-01", "X", 70, 60, 96, 90, 2),
        ("2024-03-12 15:00", "P2", "M-03", "Z", 60, 30, 80, 50, 10),
        ("2024-02-14 08:00", "P1", "M-01", "X", 75, 45, 88, 80, 8),
    ]
    df = pd.DataFrame(
        rows,
        columns=[
            "timestamp",
            "plant",
            "machine",
            "mould",
            "availability",
            "performance",
            "quality",
            "production",
            "rejection",
        ],
    )
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


@pytest.fixture
def dashboard(monkeypatch, events):
    monkeypatch.setattr(Dashboard, "today", lambda self: TODAY)
    return create_dashboard({"EVENTS_CSV": "", "DEFAULT_PRESET": "current-week"}, events=events)
