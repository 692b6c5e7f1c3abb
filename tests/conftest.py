"""Shared builders for weather snapshots, forecast series and closet fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

import pytest

from models.weather import ForecastEntry, ForecastSeries, WeatherSnapshot
from tools.wardrobe_store import SQLiteWardrobeStore


def make_snapshot(
    temperature: float = 18.0,
    condition_code: int = 800,
    timestamp_seconds: int = 0,
    location_name: str = "Amsterdam",
) -> WeatherSnapshot:
    return WeatherSnapshot(
        temperature=temperature,
        feels_like=temperature - 1,
        humidity=55,
        wind_speed=4.0,
        condition_code=condition_code,
        description="clear sky",
        icon="01d",
        location_name=location_name,
        country_code="NL",
        timestamp_seconds=timestamp_seconds,
    )


def make_series(start: datetime, count: int = 40, step_hours: int = 3) -> ForecastSeries:
    """Forecast every ``step_hours`` from ``start``; entry ``i`` has temperature ``i``."""

    entries = []
    for index in range(count):
        stamp = start + timedelta(hours=index * step_hours)
        entries.append(
            ForecastEntry(
                snapshot=make_snapshot(temperature=float(index), timestamp_seconds=int(stamp.timestamp())),
                timestamp_text=stamp.strftime("%Y-%m-%d %H:%M:%S"),
            )
        )
    return ForecastSeries(entries=tuple(entries), city_name="Amsterdam", country_code="NL")


@pytest.fixture()
def snapshot_factory() -> Callable[..., WeatherSnapshot]:
    return make_snapshot


@pytest.fixture()
def series_factory() -> Callable[..., ForecastSeries]:
    return make_series


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore(tmp_path / "closet.db")


@pytest.fixture()
def clothing_payload() -> dict:
    return {
        "image": "data:image/png;base64,iVBORw0KGgo=",
        "type": "top",
        "weather": "summer",
        "color": "white",
        "style_tags": ["casual", "work"],
        "name": "Linen shirt",
        "brand": "Example",
        "notes": "Iron on low heat.",
    }
