"""
Rental window resolution.

A booking stores calendar dates plus free-form "HH:MM" strings. These helpers
combine them into timezone-aware instants in the project's timezone.
"""
import re
from datetime import date, datetime, time

from django.utils import timezone

START_OF_DAY = time(0, 0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def _to_int(part):
    match = _LEADING_DIGITS.match(part)
    return int(match.group(1)) if match else 0


def parse_time_of_day(value):
    """
    Parse "HH:MM" into (hours, minutes).
    Missing or malformed components default to 0; out-of-range values are clamped.
    Returns None when no time string is given at all.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    parts = text.split(":")
    hours = _to_int(parts[0])
    minutes = _to_int(parts[1]) if len(parts) > 1 else 0
    return min(max(hours, 0), 23), min(max(minutes, 0), 59)


def resolve_instant(day, time_of_day=None, *, default=START_OF_DAY):
    """
    Combine `day` with `time_of_day`, falling back to `default` when no time is given.
    Returns None when `day` is not a usable date (indeterminate instant).
    """
    if isinstance(day, datetime):
        day = day.date()
    if not isinstance(day, date):
        return None

    parsed = parse_time_of_day(time_of_day)
    moment = time(*parsed) if parsed is not None else default
    return timezone.make_aware(datetime.combine(day, moment), timezone.get_current_timezone())


def window_start(booking):
    """Pickup date + pickup time (midnight when the time is absent)."""
    return resolve_instant(booking.pickup_date, booking.pickup_time, default=START_OF_DAY)


def window_end(booking):
    """Return date + return time (end of day when the time is absent)."""
    return resolve_instant(booking.return_date, booking.return_time, default=END_OF_DAY)


def has_ended(booking, now):
    # indeterminate windows are treated as still running
    end = window_end(booking)
    return end is not None and now >= end
