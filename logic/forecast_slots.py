"""Resolve a (day, time-of-day) selection against a forecast series."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Tuple

from closet_app.errors import ValidationError
from models.taxonomy import TIME_OF_DAY_HOURS, TODAY, WEEKDAYS
from models.weather import ForecastSeries, WeatherSnapshot


def target_date(day: str, today: date | None = None) -> Optional[date]:
    """Return the calendar date for ``day`` or ``None`` for an unknown weekday.

    ``"today"`` maps to ``today``; a weekday abbreviation maps to its next
    occurrence, today included, so the result is at most six days ahead.
    """

    today = today or date.today()
    key = day.strip().lower()
    if key == TODAY:
        return today
    if key not in WEEKDAYS:
        return None
    # date.weekday() counts from Monday; WEEKDAYS starts on Sunday.
    today_index = (today.weekday() + 1) % 7
    diff = (WEEKDAYS.index(key) - today_index) % 7
    return today + timedelta(days=diff)


def hour_range(time_of_day: str) -> Tuple[int, int]:
    key = time_of_day.strip().lower()
    if key not in TIME_OF_DAY_HOURS:
        raise ValidationError(
            f"Unsupported time of day '{time_of_day}'. Allowed: {sorted(TIME_OF_DAY_HOURS)}",
            details=[{"loc": ["time_of_day"], "msg": "unsupported value"}],
        )
    return TIME_OF_DAY_HOURS[key]


def resolve_slot(
    series: ForecastSeries | None,
    day: str,
    time_of_day: str,
    today: date | None = None,
) -> Optional[WeatherSnapshot]:
    """Return the first forecast entry inside the requested slot.

    Entries are scanned in series order and the first one whose date matches
    and whose hour falls in the half-open slot range wins. Entries with an
    unparseable timestamp are skipped. ``None`` means no entry covers the slot.
    """

    start, end = hour_range(time_of_day)
    if series is None:
        return None
    wanted = target_date(day, today)
    if wanted is None:
        return None
    for entry in series.entries:
        try:
            stamp = entry.timestamp
        except ValueError:
            continue
        if stamp.date() == wanted and start <= stamp.hour < end:
            return entry.snapshot
    return None


__all__ = ["target_date", "hour_range", "resolve_slot"]
