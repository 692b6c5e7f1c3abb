"""Canonical labels for clothing items, weather and time slots.

This module centralises the enumerations shared by the wardrobe store, the
weather rules and the recommendation filter. Helper functions keep validation
consistent across agents, tools and data models.
"""

from typing import Dict, Iterable, List, Tuple


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


GARMENT_TYPES = ["top", "bottom"]
SEASONAL_TAGS = ["summer", "winter", "inbetween"]
WEATHER_CONDITIONS = ["clear", "clouds", "rain", "snow", "extreme", "unknown"]
STYLE_TAGS = ["casual", "formal", "work", "sports", "nightout", "lounge", "rainy"]

WEEKDAYS = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
TODAY = "today"

# Half-open hour ranges [start, end).
TIME_OF_DAY_HOURS: Dict[str, Tuple[int, int]] = {
    "morning": (6, 12),
    "afternoon": (12, 18),
    "night": (18, 23),
}


def validate_garment_type(value: str) -> str:
    """Validate and normalise a clothing type.

    Raises a :class:`ValueError` if the type is not ``top`` or ``bottom``.
    """

    key = _normalize_key(value)
    if key not in GARMENT_TYPES:
        raise ValueError(f"Unsupported clothing type '{value}'. Allowed: {GARMENT_TYPES}")
    return key


def validate_seasonal_tag(value: str) -> str:
    """Validate and normalise a weather suitability tag."""

    key = _normalize_key(value)
    if key not in SEASONAL_TAGS:
        raise ValueError(f"Unsupported weather tag '{value}'. Allowed: {SEASONAL_TAGS}")
    return key


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Normalise and deduplicate free-form tags, keeping first-seen order."""

    normalised = []
    seen = set()
    for value in values:
        key = str(value).strip().lower()
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "GARMENT_TYPES",
    "SEASONAL_TAGS",
    "WEATHER_CONDITIONS",
    "STYLE_TAGS",
    "WEEKDAYS",
    "TODAY",
    "TIME_OF_DAY_HOURS",
    "validate_garment_type",
    "validate_seasonal_tag",
    "normalise_tags",
]
