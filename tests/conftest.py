"""Shared fixtures: provider payloads and a fixed clock."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

THREE_HOURS = 3 * 3600


def utc_ts(year, month, day, hour=0, minute=0) -> int:
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp())


def make_forecast_payload(start: int, count: int = 40, step: int = THREE_HOURS) -> dict:
    """OpenWeatherMap /forecast shaped payload, one entry every ``step`` seconds."""
    return {
        "cod": "200",
        "cnt": count,
        "list": [
            {
                "dt": start + i * step,
                "main": {"temp": 15.5 + i, "humidity": 60},
                "weather": [{"description": f"sky {i}", "icon": f"{i:02d}d"}],
            }
            for i in range(count)
        ],
        "city": {"name": "Tunis", "country": "TN"},
    }


@pytest.fixture
def now() -> int:
    """Monday 19 October 2026, 10:30 UTC."""
    return utc_ts(2026, 10, 19, 10, 30)


@pytest.fixture
def current_payload() -> dict:
    return {
        "coord": {"lon": 10.18, "lat": 36.81},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {
            "temp": 24.5,
            "feels_like": 23.49,
            "temp_min": 21.2,
            "temp_max": 26.7,
            "pressure": 1015,
            "humidity": 64,
        },
        "wind": {"speed": 4.12, "deg": 80},
        "sys": {"country": "TN"},
        "name": "Tunis",
        "cod": 200,
    }


@pytest.fixture
def forecast_payload() -> dict:
    """40 entries every 3 hours from 19 Oct 2026 12:00 UTC (5 days)."""
    return make_forecast_payload(utc_ts(2026, 10, 19, 12))
