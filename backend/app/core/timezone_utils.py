"""
Timezone utilities.

Items store timestamps as ISO-8601 UTC strings; bookings store a calendar
date plus a wall-clock time interpreted in the configured booking timezone.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Union

import pytz

from .config import settings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (millisecond precision, ``Z`` suffix)."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_utc(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp into an aware UTC datetime; None if missing or malformed."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def get_booking_timezone() -> pytz.BaseTzInfo:
    return pytz.timezone(settings.booking_timezone)


def parse_booking_date(value: Union[str, date]) -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp and return the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_booking_time(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value
    hours, minutes = str(value).split(":")[:2]
    return time(int(hours), int(minutes))


def booking_start_utc(
    booking_date: Union[str, date], booking_time: Union[str, time], tz_name: Optional[str] = None
) -> datetime:
    """
    Combine a booking date and HH:MM time into an aware UTC datetime.

    Args:
        booking_date: Calendar date (``YYYY-MM-DD``)
        booking_time: Wall-clock time (``HH:MM``)
        tz_name: Optional timezone override (defaults to the booking timezone)

    Returns:
        Aware datetime in UTC
    """
    tz = pytz.timezone(tz_name) if tz_name else get_booking_timezone()
    local = datetime.combine(parse_booking_date(booking_date), parse_booking_time(booking_time))
    return tz.localize(local).astimezone(timezone.utc)
