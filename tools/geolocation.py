"""Best-effort device position lookup."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from closet_app.config import ClosetConfig
from models.weather import Coordinates


LOGGER = logging.getLogger(__name__)


class GeolocationUnavailable(Exception):
    """Raised by providers when the position is denied or unsupported."""


class GeolocationProvider(ABC):
    @abstractmethod
    def current_position(self) -> Optional[Coordinates]:
        """Return the device position or ``None`` when it is unknown."""


class StaticGeolocationProvider(GeolocationProvider):
    """Reports a fixed position, or no position at all."""

    def __init__(self, coordinates: Coordinates | None = None) -> None:
        self.coordinates = coordinates

    def current_position(self) -> Optional[Coordinates]:
        return self.coordinates

    @classmethod
    def from_config(cls, config: ClosetConfig) -> "StaticGeolocationProvider":
        if config.default_latitude is None or config.default_longitude is None:
            return cls(None)
        return cls(Coordinates(latitude=config.default_latitude, longitude=config.default_longitude))


class DeniedGeolocationProvider(GeolocationProvider):
    """Models a platform where the user refused location access."""

    def current_position(self) -> Optional[Coordinates]:
        raise GeolocationUnavailable("location permission denied")


def locate_user(provider: GeolocationProvider | None) -> Optional[Coordinates]:
    """Return the device position, resolving denial or absence to ``None``."""

    if provider is None:
        return None
    try:
        return provider.current_position()
    except GeolocationUnavailable as exc:
        LOGGER.info("Geolocation unavailable", extra={"reason": str(exc)})
        return None


__all__ = [
    "GeolocationProvider",
    "GeolocationUnavailable",
    "StaticGeolocationProvider",
    "DeniedGeolocationProvider",
    "locate_user",
]
