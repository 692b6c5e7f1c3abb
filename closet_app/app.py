"""Virtual Closet app bootstrap."""

from __future__ import annotations

from dataclasses import asdict
import logging
from typing import Any, Dict, Optional

from agents.auth_agent import AuthAgent
from agents.closet_agent import ClosetAgent
from agents.orchestrator import OrchestratorAgent
from agents.weather_agent import WeatherAgent
from closet_app.config import ClosetConfig
from closet_app.logging_config import configure_logging, get_logger, log_event
from memory.local_storage import JSONLocalStorage, LocalStorage, SessionMarkerStore
from models.user import User
from tools.geolocation import GeolocationProvider, StaticGeolocationProvider
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore
from tools.weather_provider import OpenWeatherProvider, WeatherProvider


LOGGER = get_logger(__name__)


class VirtualClosetApp:
    """Wires together storage, providers and agents for one device."""

    def __init__(
        self,
        config: ClosetConfig | None = None,
        *,
        store: WardrobeStore | None = None,
        local_storage: LocalStorage | None = None,
        weather_provider: WeatherProvider | None = None,
        geolocation: GeolocationProvider | None = None,
    ) -> None:
        self.config = config or ClosetConfig.from_env()
        configure_logging()

        self.store = store or SQLiteWardrobeStore(self.config.wardrobe_db_path or "data/closet.db")
        self.local_storage = local_storage or JSONLocalStorage(
            self.config.local_storage_path or "data/local_storage.json"
        )
        self.weather_provider = weather_provider or OpenWeatherProvider(
            api_key=self.config.weather_api_key,
            base_url=self.config.weather_base_url,
            timeout_seconds=self.config.request_timeout_seconds,
        )
        self.geolocation = geolocation or StaticGeolocationProvider.from_config(self.config)

        self.auth_agent = AuthAgent(self.store, SessionMarkerStore(self.local_storage))
        self.closet_agent = ClosetAgent(self.store)
        self.weather_agent = WeatherAgent(self.config, self.weather_provider, self.geolocation)
        self.orchestrator = OrchestratorAgent(self.closet_agent, self.weather_agent)

    @property
    def current_user(self) -> Optional[User]:
        return self.auth_agent.current_user

    def _on_signed_in(self, user: User) -> User:
        self.closet_agent.set_user(user.id)
        self.weather_agent.refresh(user)
        return user

    def restore_session(self) -> Optional[User]:
        """Short-circuit login when a session marker is present."""

        user = self.auth_agent.restore()
        if user:
            self._on_signed_in(user)
        return user

    def signup(self, payload: Dict[str, Any]) -> User:
        return self._on_signed_in(self.auth_agent.signup(payload))

    def login(self, payload: Dict[str, Any]) -> User:
        return self._on_signed_in(self.auth_agent.login(payload))

    def logout(self) -> None:
        self.auth_agent.logout()
        self.closet_agent.set_user(None)

    def update_profile(self, changes: Dict[str, Any]) -> User:
        """Save profile changes; a new location also switches the weather city.

        The profile is saved even when the weather lookup for the new city
        fails; the :class:`WeatherError` is re-raised for the caller to show.
        """

        user = self.auth_agent.update_profile(changes)
        location = user.preferences.location
        if changes.get("location") and location:
            self.weather_agent.update_location(location)
        return user

    def export_data(self) -> Dict[str, Any]:
        """Collect everything stored for the signed-in user."""

        user = self.auth_agent.require_user()
        marker = self.auth_agent.markers.load()
        return {
            "userData": {"id": marker.id, "email": marker.email} if marker else None,
            "user": asdict(user),
            "clothing": [asdict(item) for item in self.store.list_clothing_for_user(user.id)],
            "outfits": [asdict(outfit) for outfit in self.store.list_outfits_for_user(user.id)],
        }

    def reset_data(self) -> None:
        """Forget local settings and sign out; stored closet records are kept."""

        self.local_storage.clear()
        self.logout()
        log_event(LOGGER, logging.INFO, "local_data_reset")

    def retry_weather(self) -> bool:
        return self.weather_agent.refresh(self.current_user)


__all__ = ["VirtualClosetApp"]
