"""Weather provider abstractions and the OpenWeather implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, field_validator
from pydantic import ValidationError as SchemaValidationError

from closet_app.errors import NetworkError, ProviderError, ValidationError
from models.weather import (
    FORECAST_TIMESTAMP_FORMAT,
    CityLocation,
    Coordinates,
    ForecastEntry,
    ForecastSeries,
    LocationSpec,
    WeatherSnapshot,
)
from tools.observability import instrument_operation


LOGGER = logging.getLogger(__name__)


class _WeatherCondition(BaseModel):
    id: int
    main: str = ""
    description: str = "unknown"
    icon: str = ""


class _Wind(BaseModel):
    speed: float = 0.0


class _Main(BaseModel):
    temp: float
    feels_like: float
    humidity: int


class _Sys(BaseModel):
    country: str = ""
    sunrise: Optional[int] = None
    sunset: Optional[int] = None


class _CurrentResponse(BaseModel):
    main: _Main
    weather: List[_WeatherCondition]
    wind: _Wind = _Wind()
    name: str = ""
    dt: int
    sys: _Sys = _Sys()


class _ForecastItem(BaseModel):
    main: _Main
    weather: List[_WeatherCondition]
    wind: _Wind = _Wind()
    dt: int
    dt_txt: str

    @field_validator("dt_txt")
    @classmethod
    def _parseable_timestamp(cls, dt_txt: str) -> str:
        datetime.strptime(dt_txt, FORECAST_TIMESTAMP_FORMAT)
        return dt_txt


class _City(BaseModel):
    name: str = ""
    country: str = ""


class _ForecastResponse(BaseModel):
    list: List[_ForecastItem] = []
    city: _City = _City()


def _snapshot(
    main: _Main,
    conditions: List[_WeatherCondition],
    wind: _Wind,
    dt: int,
    location_name: str,
    country_code: str,
) -> WeatherSnapshot:
    if not conditions:
        raise ProviderError("Weather payload did not include a condition")
    condition = conditions[0]
    return WeatherSnapshot(
        temperature=main.temp,
        feels_like=main.feels_like,
        humidity=main.humidity,
        wind_speed=wind.speed,
        condition_code=condition.id,
        description=condition.description,
        icon=condition.icon,
        location_name=location_name,
        country_code=country_code,
        timestamp_seconds=dt,
    )


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def fetch_current(self, location: LocationSpec) -> WeatherSnapshot:
        """Return current conditions for a city or coordinate pair."""

    @abstractmethod
    def fetch_forecast(self, location: LocationSpec) -> ForecastSeries:
        """Return the 5-day / 3-hour forecast for a city or coordinate pair."""


class OpenWeatherProvider(WeatherProvider):
    """OpenWeather client with schema validation.

    Transport failures raise :class:`NetworkError`; non-success statuses and
    payloads that fail validation raise :class:`ProviderError`.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = "https://api.openweathermap.org/data/2.5",
        timeout_seconds: float = 10.0,
        units: str = "metric",
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.units = units
        self.session = session

    def _location_params(self, location: LocationSpec) -> Dict[str, Any]:
        if isinstance(location, CityLocation):
            if not location.name.strip():
                raise ValidationError("Please enter a city name")
            return {"q": location.name.strip()}
        if isinstance(location, Coordinates):
            return {"lat": location.latitude, "lon": location.longitude}
        raise TypeError(f"Unsupported location spec: {location!r}")

    def _get(self, endpoint: str, location: LocationSpec) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderError("Weather API key is not configured")

        params = {
            **self._location_params(location),
            "units": self.units,
            "appid": self.api_key,
        }
        url = f"{self.base_url}/{endpoint}"
        getter = self.session.get if self.session else requests.get
        LOGGER.info("Fetching weather data", extra={"endpoint": endpoint})

        try:
            response = getter(url, params=params, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise NetworkError(f"Weather provider unreachable: {exc.__class__.__name__}") from exc

        if not response.ok:
            raise ProviderError(self._error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError("Weather provider returned invalid JSON", status_code=response.status_code) from exc

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            detail = response.json().get("message")
        except (ValueError, AttributeError):
            detail = None
        if detail:
            return f"Weather data could not be fetched: {detail}"
        return f"Weather data could not be fetched (HTTP {response.status_code})"

    @instrument_operation("weather.fetch_current")
    def fetch_current(self, location: LocationSpec) -> WeatherSnapshot:
        payload = self._get("weather", location)
        try:
            parsed = _CurrentResponse.model_validate(payload)
        except SchemaValidationError as exc:
            LOGGER.error("Current weather payload schema validation failed", exc_info=exc)
            raise ProviderError("Weather payload did not match the expected schema") from exc
        return _snapshot(parsed.main, parsed.weather, parsed.wind, parsed.dt, parsed.name, parsed.sys.country)

    @instrument_operation("weather.fetch_forecast")
    def fetch_forecast(self, location: LocationSpec) -> ForecastSeries:
        payload = self._get("forecast", location)
        try:
            parsed = _ForecastResponse.model_validate(payload)
        except SchemaValidationError as exc:
            LOGGER.error("Forecast payload schema validation failed", exc_info=exc)
            raise ProviderError("Forecast payload did not match the expected schema") from exc
        entries = tuple(
            ForecastEntry(
                snapshot=_snapshot(
                    item.main, item.weather, item.wind, item.dt, parsed.city.name, parsed.city.country
                ),
                timestamp_text=item.dt_txt,
            )
            for item in parsed.list
        )
        return ForecastSeries(entries=entries, city_name=parsed.city.name, country_code=parsed.city.country)


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests and local runs."""

    def __init__(
        self,
        current: WeatherSnapshot | None = None,
        forecast: ForecastSeries | None = None,
        error: Exception | None = None,
    ) -> None:
        self.current = current or WeatherSnapshot(
            temperature=18.0,
            feels_like=17.0,
            humidity=60,
            wind_speed=3.0,
            condition_code=800,
            description="clear sky",
            icon="01d",
            location_name="New York",
            country_code="US",
            timestamp_seconds=0,
        )
        self.forecast = forecast if forecast is not None else ForecastSeries(city_name=self.current.location_name)
        self.error = error
        self.calls: List[tuple] = []

    def fetch_current(self, location: LocationSpec) -> WeatherSnapshot:
        self.calls.append(("current", location))
        if self.error:
            raise self.error
        return self.current

    def fetch_forecast(self, location: LocationSpec) -> ForecastSeries:
        self.calls.append(("forecast", location))
        if self.error:
            raise self.error
        return self.forecast


__all__ = ["WeatherProvider", "OpenWeatherProvider", "MockWeatherProvider"]
