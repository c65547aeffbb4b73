"""
Time utility functions shared by the normalizer, the extractor and the
collaborator-facing handlers.

- Clock times in chat text: "3pm", "3:30 PM", "11 a.m."
- Internal storage: timezone-aware datetimes
- Wire format: ISO-8601 UTC with a trailing "Z"
"""

import re
from typing import Optional, Tuple
from datetime import datetime, timezone

import pytz
from dateutil import parser


CLOCK_PATTERN = r'\b(\d{1,2})(?::(\d{2}))?\s*([ap])\.?\s?m\b\.?'
CLOCK_RE = re.compile(CLOCK_PATTERN, re.IGNORECASE)


class TimeFormat:
    """
    Utility class for clock-time conversions.
    """

    @staticmethod
    def parse_clock(text: str) -> Optional[Tuple[int, int]]:
        """
        Find the first 12-hour clock time in text and convert it to 24-hour form.

        Handles:
        - "3 PM" → (15, 0)
        - "3:30pm" → (15, 30)
        - "12am" → (0, 0)
        - "12pm" → (12, 0)

        Returns:
            (hour, minute) or None when there is no valid clock time
        """
        if not text:
            return None

        match = CLOCK_RE.search(text)
        if not match:
            return None

        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0

        if hour < 1 or hour > 12 or minute >= 60:
            return None

        return TimeFormat.to_24hr(hour, match.group(3)), minute

    @staticmethod
    def to_24hr(hour: int, meridiem: str) -> int:
        meridiem = meridiem.lower()[0]
        if meridiem == 'a' and hour == 12:
            return 0
        if meridiem == 'p' and hour != 12:
            return hour + 12
        return hour

    @staticmethod
    def to_12hr_display(dt: datetime) -> str:
        """
        "15:00" → "3:00 PM", "09:05" → "9:05 AM"
        """
        hour_12 = dt.hour % 12 or 12
        am_pm = "AM" if dt.hour < 12 else "PM"
        return f"{hour_12}:{dt.minute:02d} {am_pm}"


def to_iso_utc(dt: datetime) -> str:
    """Serialize an aware datetime as ISO-8601 UTC ("2026-10-18T15:00:00Z")."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    dt = parser.isoparse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_for_display(value, timezone_name: str) -> str:
    """
    Human-readable local time, e.g. "Monday, October 19 at 3:00 PM SAST".
    Accepts an ISO string or a datetime.
    """
    dt = parse_iso(value) if isinstance(value, str) else value
    local = dt.astimezone(pytz.timezone(timezone_name))
    return f"{local.strftime('%A, %B')} {local.day} at {TimeFormat.to_12hr_display(local)} {local.strftime('%Z')}"
