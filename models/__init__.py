"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import Outfit
from models.user import User, UserPreferences
from models.weather import (
    CityLocation,
    Coordinates,
    ForecastEntry,
    ForecastSeries,
    LocationSpec,
    WeatherSnapshot,
)

__all__ = [
    "ClothingItem",
    "from_raw_metadata",
    "Outfit",
    "User",
    "UserPreferences",
    "CityLocation",
    "Coordinates",
    "ForecastEntry",
    "ForecastSeries",
    "LocationSpec",
    "WeatherSnapshot",
]
