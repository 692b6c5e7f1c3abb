"""Weather agent that keeps the displayed conditions and forecast fresh."""

from __future__ import annotations

import contextvars
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from closet_app.config import ClosetConfig
from closet_app.errors import ValidationError, WeatherError
from closet_app.logging_config import get_logger, log_event, operation_context
from logic.forecast_slots import resolve_slot
from logic.weather_rules import classify_condition, is_daytime, suggest_seasonal_tag, weather_icon
from models.user import User
from models.weather import CityLocation, ForecastSeries, LocationSpec, WeatherSnapshot
from tools.geolocation import GeolocationProvider, locate_user
from tools.weather_provider import WeatherProvider


LOGGER = get_logger(__name__)

REFRESH_FAILED_MESSAGE = "Failed to fetch weather data. Please try again later."
LOCATION_FAILED_MESSAGE = "Failed to update location. Please check the city name and try again."


class WeatherAgent:
    """Fetches weather and derives the condition and seasonal clothing tag.

    Current conditions and the forecast are fetched together and applied only
    when both succeed. Overlapping refreshes are serialized, so the last one to
    finish decides what is displayed.
    """

    def __init__(
        self,
        config: ClosetConfig,
        provider: WeatherProvider,
        geolocation: GeolocationProvider | None = None,
    ) -> None:
        self.config = config
        self.provider = provider
        self.geolocation = geolocation
        self.current: Optional[WeatherSnapshot] = None
        self.forecast: Optional[ForecastSeries] = None
        self.error: Optional[str] = None
        self.location: Optional[LocationSpec] = None
        self._refresh_lock = threading.Lock()

    @property
    def weather_condition(self) -> str:
        if not self.current:
            return "unknown"
        return classify_condition(self.current.condition_code)

    @property
    def suggested_weather_tag(self) -> str:
        if not self.current:
            return "inbetween"
        return suggest_seasonal_tag(self.current.temperature)

    def choose_location(self, user: User | None) -> LocationSpec:
        """Saved city preference, then device position, then the default city."""

        saved = (user.preferences.location or "").strip() if user else ""
        if saved:
            return CityLocation(saved)
        position = locate_user(self.geolocation)
        if position:
            return position
        return CityLocation(self.config.default_city)

    def _fetch_both(self, location: LocationSpec) -> Tuple[WeatherSnapshot, ForecastSeries]:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="weather") as pool:
            current_future = pool.submit(contextvars.copy_context().run, self.provider.fetch_current, location)
            forecast_future = pool.submit(contextvars.copy_context().run, self.provider.fetch_forecast, location)
            # result() re-raises the first failure; nothing is applied then.
            current = current_future.result()
            forecast = forecast_future.result()
        return current, forecast

    def _apply(self, location: LocationSpec, correlation_id: str) -> None:
        with self._refresh_lock:
            current, forecast = self._fetch_both(location)
            self.current = current
            self.forecast = forecast
            self.location = location
            self.error = None
        log_event(
            LOGGER,
            logging.INFO,
            "weather_refreshed",
            correlation_id=correlation_id,
            condition=self.weather_condition,
            seasonal_tag=self.suggested_weather_tag,
            forecast_entries=len(forecast),
        )

    def refresh(self, user: User | None = None) -> bool:
        """Refresh for the user's location; on failure keep stale data and set ``error``."""

        with operation_context("agent:weather.refresh") as correlation_id:
            location = self.choose_location(user)
            try:
                self._apply(location, correlation_id)
            except (WeatherError, ValidationError) as exc:
                self.error = REFRESH_FAILED_MESSAGE
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "weather_refresh_failed",
                    correlation_id=correlation_id,
                    error_type=type(exc).__name__,
                    error=exc.message,
                )
                return False
            return True

    def update_location(self, city: str) -> Optional[WeatherSnapshot]:
        """Switch to ``city``; failures set ``error`` and propagate."""

        if not city or not city.strip():
            raise ValidationError("City name is required")
        with operation_context("agent:weather.update_location") as correlation_id:
            try:
                self._apply(CityLocation(city.strip()), correlation_id)
            except WeatherError:
                self.error = LOCATION_FAILED_MESSAGE
                raise
            return self.current

    def forecast_for_slot(self, day: str, time_of_day: str, today: date | None = None) -> Optional[WeatherSnapshot]:
        return resolve_slot(self.forecast, day, time_of_day, today=today)

    def summary(self) -> Dict[str, object]:
        current = self.current
        icon = None
        if current:
            local_hour = datetime.fromtimestamp(current.timestamp_seconds).hour
            icon = weather_icon(current.condition_code, is_daytime(local_hour))
        return {
            "current": current,
            "icon": icon,
            "condition": self.weather_condition,
            "suggested_weather_tag": self.suggested_weather_tag,
            "forecast_entries": len(self.forecast) if self.forecast else 0,
            "error": self.error,
        }


__all__ = ["WeatherAgent", "REFRESH_FAILED_MESSAGE", "LOCATION_FAILED_MESSAGE"]
