"""Weather agent refresh, location fallback and slot lookup behaviour."""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from datetime import date, datetime

import pytest

from agents.weather_agent import LOCATION_FAILED_MESSAGE, REFRESH_FAILED_MESSAGE, WeatherAgent
from closet_app.config import ClosetConfig
from closet_app.errors import NetworkError, ProviderError, ValidationError
from models.user import User, UserPreferences
from models.weather import CityLocation, Coordinates, ForecastSeries
from tools.geolocation import DeniedGeolocationProvider, StaticGeolocationProvider
from tools.weather_provider import MockWeatherProvider


class ForecastDownProvider(MockWeatherProvider):
    """Current conditions succeed while the forecast endpoint fails."""

    def fetch_forecast(self, location):
        self.calls.append(("forecast", location))
        raise ProviderError("forecast unavailable", status_code=500)


def _config() -> ClosetConfig:
    return ClosetConfig(weather_api_key="test", default_city="Amsterdam")


def _user(location: str | None = None) -> User:
    return User(id="u1", name="Ada", email="ada@example.com", preferences=UserPreferences(location=location))


def test_defaults_before_any_refresh() -> None:
    agent = WeatherAgent(_config(), MockWeatherProvider())

    assert agent.current is None
    assert agent.weather_condition == "unknown"
    assert agent.suggested_weather_tag == "inbetween"
    assert agent.forecast_for_slot("today", "morning") is None


def test_refresh_applies_current_and_forecast(snapshot_factory, series_factory) -> None:
    series = series_factory(datetime(2026, 10, 19, 0, 0))
    provider = MockWeatherProvider(current=snapshot_factory(temperature=28.0, condition_code=500), forecast=series)
    agent = WeatherAgent(_config(), provider)

    assert agent.refresh(_user()) is True

    assert agent.current.temperature == 28.0
    assert agent.forecast is series
    assert agent.weather_condition == "rain"
    assert agent.suggested_weather_tag == "summer"
    assert agent.error is None
    assert agent.location == CityLocation("Amsterdam")


def test_saved_city_preference_wins_over_device_position() -> None:
    provider = MockWeatherProvider()
    geolocation = StaticGeolocationProvider(Coordinates(latitude=52.37, longitude=4.9))
    agent = WeatherAgent(_config(), provider, geolocation)

    agent.refresh(_user(location="Lisbon"))

    assert {location for _, location in provider.calls} == {CityLocation("Lisbon")}


def test_device_position_used_without_saved_city() -> None:
    provider = MockWeatherProvider()
    coordinates = Coordinates(latitude=52.37, longitude=4.9)
    agent = WeatherAgent(_config(), provider, StaticGeolocationProvider(coordinates))

    agent.refresh(_user())

    assert {location for _, location in provider.calls} == {coordinates}
    assert agent.location == coordinates


def test_denied_geolocation_falls_back_to_default_city() -> None:
    provider = MockWeatherProvider()
    agent = WeatherAgent(_config(), provider, DeniedGeolocationProvider())

    agent.refresh(None)

    assert {location for _, location in provider.calls} == {CityLocation("Amsterdam")}


def test_failed_refresh_keeps_previous_data(snapshot_factory) -> None:
    provider = MockWeatherProvider(current=snapshot_factory(temperature=12.0))
    agent = WeatherAgent(_config(), provider)
    agent.refresh(_user())

    provider.error = NetworkError("offline")
    assert agent.refresh(_user()) is False

    assert agent.current.temperature == 12.0
    assert agent.error == REFRESH_FAILED_MESSAGE


def test_partial_failure_applies_nothing(snapshot_factory) -> None:
    provider = ForecastDownProvider(current=snapshot_factory(temperature=30.0))
    agent = WeatherAgent(_config(), provider)

    assert agent.refresh(_user()) is False

    assert agent.current is None
    assert agent.forecast is None
    assert agent.error == REFRESH_FAILED_MESSAGE


def test_successful_refresh_clears_previous_error() -> None:
    provider = MockWeatherProvider(error=NetworkError("offline"))
    agent = WeatherAgent(_config(), provider)
    agent.refresh(_user())
    assert agent.error == REFRESH_FAILED_MESSAGE

    provider.error = None
    assert agent.refresh(_user()) is True
    assert agent.error is None


def test_update_location_switches_city(snapshot_factory) -> None:
    provider = MockWeatherProvider(current=snapshot_factory(location_name="Oslo"))
    agent = WeatherAgent(_config(), provider)

    snapshot = agent.update_location("  Oslo ")

    assert snapshot.location_name == "Oslo"
    assert agent.location == CityLocation("Oslo")


def test_update_location_failure_sets_error_and_raises() -> None:
    provider = MockWeatherProvider(error=ProviderError("city not found", status_code=404))
    agent = WeatherAgent(_config(), provider)

    with pytest.raises(ProviderError):
        agent.update_location("Atlantis")
    assert agent.error == LOCATION_FAILED_MESSAGE


def test_update_location_requires_city() -> None:
    provider = MockWeatherProvider()
    agent = WeatherAgent(_config(), provider)

    with pytest.raises(ValidationError):
        agent.update_location("   ")
    assert provider.calls == []


def test_forecast_for_slot_uses_loaded_series(series_factory) -> None:
    provider = MockWeatherProvider(forecast=series_factory(datetime(2026, 10, 19, 0, 0)))
    agent = WeatherAgent(_config(), provider)
    agent.refresh(_user())

    slot = agent.forecast_for_slot("today", "morning", today=date(2026, 10, 19))

    assert slot is not None
    assert slot.temperature == 2.0


def test_summary_includes_icon_once_loaded(snapshot_factory) -> None:
    agent = WeatherAgent(_config(), MockWeatherProvider(current=snapshot_factory(condition_code=500)))
    assert agent.summary()["icon"] is None

    agent.refresh(None)

    summary = agent.summary()
    assert summary["icon"] == "🌧️"
    assert summary["condition"] == "rain"
    assert summary["forecast_entries"] == 0


def test_blank_saved_city_falls_back_to_default() -> None:
    provider = MockWeatherProvider()
    agent = WeatherAgent(_config(), provider)

    assert agent.refresh(_user(location="   ")) is True

    assert {location for _, location in provider.calls} == {CityLocation("Amsterdam")}


def test_rejected_location_is_a_failed_refresh() -> None:
    provider = MockWeatherProvider(error=ValidationError("Please enter a city name"))
    agent = WeatherAgent(_config(), provider)

    assert agent.refresh(_user()) is False
    assert agent.error == REFRESH_FAILED_MESSAGE


class RendezvousProvider(MockWeatherProvider):
    """``fetch_current`` only returns once ``fetch_forecast`` has started."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.forecast_started = threading.Event()
        self.saw_forecast_in_flight = False

    def fetch_current(self, location):
        self.saw_forecast_in_flight = self.forecast_started.wait(timeout=5)
        return super().fetch_current(location)

    def fetch_forecast(self, location):
        self.forecast_started.set()
        return super().fetch_forecast(location)


def test_current_and_forecast_are_fetched_concurrently() -> None:
    provider = RendezvousProvider()
    agent = WeatherAgent(_config(), provider)

    assert agent.refresh(_user()) is True

    assert provider.saw_forecast_in_flight is True
    assert agent.current is not None


class GatedProvider(MockWeatherProvider):
    """Holds fetches for the gated city until ``gate`` is released."""

    def __init__(self, gated_city: str) -> None:
        super().__init__()
        self.gated_city = gated_city
        self.gate = threading.Event()
        self.entered = threading.Event()
        self._calls_lock = threading.Lock()

    def _snapshot_for(self, location):
        return replace(self.current, location_name=location.name)

    def fetch_current(self, location):
        with self._calls_lock:
            self.calls.append(("current", location))
        if location.name == self.gated_city:
            self.entered.set()
            self.gate.wait(timeout=5)
        return self._snapshot_for(location)

    def fetch_forecast(self, location):
        with self._calls_lock:
            self.calls.append(("forecast", location))
        return ForecastSeries(city_name=location.name)


def test_overlapping_refreshes_are_serialized_and_last_one_wins() -> None:
    provider = GatedProvider(gated_city="Oslo")
    agent = WeatherAgent(_config(), provider)

    first = threading.Thread(target=agent.refresh, args=(_user(location="Oslo"),))
    first.start()
    assert provider.entered.wait(timeout=5)

    second = threading.Thread(target=agent.refresh, args=(_user(location="Lima"),))
    second.start()
    time.sleep(0.05)
    # The second refresh is waiting for the first one to finish.
    assert ("current", CityLocation("Lima")) not in provider.calls

    provider.gate.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert agent.current.location_name == "Lima"
    assert agent.forecast.city_name == "Lima"
    assert agent.location == CityLocation("Lima")
    lima_calls = [index for index, (_, location) in enumerate(provider.calls) if location.name == "Lima"]
    oslo_calls = [index for index, (_, location) in enumerate(provider.calls) if location.name == "Oslo"]
    assert max(oslo_calls) < min(lima_calls)
