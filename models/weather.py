"""Weather snapshots, forecast series and location specs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple, Union

FORECAST_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class CityLocation:
    name: str


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


LocationSpec = Union[CityLocation, Coordinates]


@dataclass(frozen=True)
class WeatherSnapshot:
    """Conditions at one instant; replaced wholesale on every refresh."""

    temperature: float
    feels_like: float
    humidity: int
    wind_speed: float
    condition_code: int
    description: str
    location_name: str
    country_code: str
    timestamp_seconds: int
    icon: str = ""


@dataclass(frozen=True)
class ForecastEntry:
    snapshot: WeatherSnapshot
    timestamp_text: str

    @property
    def timestamp(self) -> datetime:
        """Parse the provider's ``dt_txt`` (``YYYY-MM-DD HH:MM:SS``)."""

        return datetime.strptime(self.timestamp_text, FORECAST_TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class ForecastSeries:
    """Ordered 3-hourly forecast entries for roughly five days."""

    entries: Tuple[ForecastEntry, ...] = ()
    city_name: str = ""
    country_code: str = ""

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


__all__ = [
    "FORECAST_TIMESTAMP_FORMAT",
    "CityLocation",
    "Coordinates",
    "LocationSpec",
    "WeatherSnapshot",
    "ForecastEntry",
    "ForecastSeries",
]
