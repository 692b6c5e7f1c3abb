"""Deterministic mappings from provider readings to wardrobe-friendly labels."""

from __future__ import annotations


def classify_condition(code: int) -> str:
    """Map an OpenWeather condition code to a coarse category.

    200-599 rain, 600-699 snow, 800 clear, 801-899 clouds, 900 and above
    extreme. Anything else (including 700-799 atmosphere codes) is unknown.
    """

    if 200 <= code < 600:
        return "rain"
    if 600 <= code < 700:
        return "snow"
    if code == 800:
        return "clear"
    if 801 <= code < 900:
        return "clouds"
    if code >= 900:
        return "extreme"
    return "unknown"


def suggest_seasonal_tag(temperature_celsius: float) -> str:
    """Pick the clothing weather tag for a temperature; 10 and 25 are inbetween."""

    if temperature_celsius > 25:
        return "summer"
    if temperature_celsius < 10:
        return "winter"
    return "inbetween"


def is_daytime(hour: int) -> bool:
    return 6 < hour < 20


_DAY_ICONS = {
    "clear": "☀️",
    "clouds": "⛅",
}
_NIGHT_ICONS = {
    "clear": "🌙",
    "clouds": "☁️",
}
_ICONS = {
    "rain": "🌧️",
    "snow": "❄️",
    "extreme": "⛈️",
}
_DEFAULT_ICON = "🌤️"


def weather_icon(code: int, is_day: bool) -> str:
    """Return a display glyph for a condition code."""

    condition = classify_condition(code)
    icons = _DAY_ICONS if is_day else _NIGHT_ICONS
    if condition in icons:
        return icons[condition]
    return _ICONS.get(condition, _DEFAULT_ICON)


__all__ = ["classify_condition", "suggest_seasonal_tag", "is_daytime", "weather_icon"]
