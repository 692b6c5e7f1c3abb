"""Error taxonomy shared by the weather, storage and closet layers."""

from __future__ import annotations

from typing import Any, Dict, List


class ClosetError(Exception):
    """Base class for recoverable Virtual Closet failures."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        self.message = message or self.user_message


class WeatherError(ClosetError):
    """Raised when weather data could not be obtained."""

    user_message = "Failed to fetch weather data. Please try again later."


class NetworkError(WeatherError):
    """The weather provider could not be reached."""


class ProviderError(WeatherError):
    """The weather provider answered with a non-success status or bad payload."""

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageError(ClosetError):
    """A local persistence operation failed."""

    user_message = "Failed to access your closet."


class ValidationError(ClosetError, ValueError):
    """User input is missing required fields or is inconsistent."""

    def __init__(self, message: str, details: List[Dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class NotAuthenticatedError(ClosetError):
    user_message = "User not authenticated"


class NotFoundError(ClosetError):
    user_message = "Not found"


__all__ = [
    "ClosetError",
    "WeatherError",
    "NetworkError",
    "ProviderError",
    "StorageError",
    "ValidationError",
    "NotAuthenticatedError",
    "NotFoundError",
]
