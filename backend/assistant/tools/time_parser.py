from datetime import datetime, date, timedelta, timezone
from typing import Optional, Tuple
import re

from .timezone import TimezoneManager
from ..utils.logger import logger
from ..utils.time_utils import TimeFormat, CLOCK_PATTERN, to_iso_utc, parse_iso


class TimeNormalizer:
    """
    Converts a natural-language time fragment ("tomorrow 2pm", "5pm CAT",
    "2024-03-01 9:30am - 10:30am") into a UTC ISO-8601 instant.

    Never raises on unrecognised input: a fragment without a usable time
    resolves to one hour from now so confirmation can always complete.
    """

    WEEKDAYS = {
        'monday': 0, 'mon': 0,
        'tuesday': 1, 'tue': 1, 'tues': 1,
        'wednesday': 2, 'wed': 2,
        'thursday': 3, 'thu': 3, 'thur': 3, 'thurs': 3,
        'friday': 4, 'fri': 4,
        'saturday': 5, 'sat': 5,
        'sunday': 6, 'sun': 6
    }

    # Default local start hour for vague time-of-day words
    TIME_OF_DAY = {
        'noon': 12,
        'midday': 12,
        'midnight': 0,
        'morning': 9,
        'afternoon': 14,
        'evening': 18,
        'tonight': 20,
        'night': 20,
    }

    ISO_DATE_RE = re.compile(r'\b(\d{4})-(\d{2})-(\d{2})\b')
    RANGE_RE = re.compile(
        r'\b(\d{1,2})(?::(\d{2}))?\s*(?:([ap])\.?\s?m\.?)?\s*[-–]\s*' + CLOCK_PATTERN,
        re.IGNORECASE
    )
    WEEKDAY_RE = re.compile(
        r'\b(next\s+)?(' + '|'.join(sorted(WEEKDAYS, key=len, reverse=True)) + r')\b',
        re.IGNORECASE
    )

    def __init__(self, default_timezone: Optional[str] = None):
        self.default_timezone = default_timezone

    def normalize(self, fragment: str, now: Optional[datetime] = None, timezone_hint: Optional[str] = None) -> str:
        now = self._aware(now)
        text = (fragment or '').strip()

        offset, tz_label = TimezoneManager.resolve_offset(text, timezone_hint or self.default_timezone, now)
        text_lower = TimezoneManager.strip_timezone_tokens(text).lower()

        clock = self.parse_start_time(text_lower)
        if clock is None:
            fallback = now + timedelta(hours=1)
            logger.info(f"⏱️ No time found in '{fragment}', falling back to now + 1h ({to_iso_utc(fallback)})")
            return to_iso_utc(fallback)

        hour, minute = clock
        local_today = (now + timedelta(hours=offset)).date()
        target_date = self.resolve_date(text_lower, local_today)

        utc_hour = hour - offset
        day_shift = 0
        if utc_hour < 0:
            utc_hour += 24
            day_shift = -1
        elif utc_hour >= 24:
            utc_hour -= 24
            day_shift = 1
        utc_hour = max(0, min(23, utc_hour))

        target_date = target_date + timedelta(days=day_shift)
        result = datetime(target_date.year, target_date.month, target_date.day, utc_hour, minute, tzinfo=timezone.utc)

        logger.info(f"🕐 Normalized '{fragment}' ({tz_label}, offset {offset:+d}h) → {to_iso_utc(result)}")
        return to_iso_utc(result)

    def parse_start_time(self, text: str) -> Optional[Tuple[int, int]]:
        """
        Start of the requested time in 24-hour form, or None.

        Ranges use their start ("2pm - 3pm" → 14:00, "2-3pm" → 14:00).
        """
        range_match = self.RANGE_RE.search(text)
        if range_match:
            start_hour = int(range_match.group(1))
            start_minute = int(range_match.group(2)) if range_match.group(2) else 0
            meridiem = range_match.group(3) or range_match.group(6)
            if 1 <= start_hour <= 12 and start_minute < 60:
                return TimeFormat.to_24hr(start_hour, meridiem), start_minute

        clock = TimeFormat.parse_clock(text)
        if clock:
            return clock

        for word, hour in self.TIME_OF_DAY.items():
            if re.search(rf'\b{word}\b', text):
                return hour, 0

        return None

    def resolve_date(self, text: str, today: date) -> date:
        iso_match = self.ISO_DATE_RE.search(text)
        if iso_match:
            try:
                return date(int(iso_match.group(1)), int(iso_match.group(2)), int(iso_match.group(3)))
            except ValueError:
                logger.warning(f"Invalid explicit date '{iso_match.group(0)}', ignoring it")

        if 'tomorrow' in text:
            return today + timedelta(days=1)

        if 'next week' in text:
            return today + timedelta(days=7)

        weekday_match = self.WEEKDAY_RE.search(text)
        if weekday_match:
            return self._get_next_weekday(today, self.WEEKDAYS[weekday_match.group(2).lower()], bool(weekday_match.group(1)))

        return today

    def _get_next_weekday(self, today: date, target_day: int, explicit_next: bool) -> date:
        days_ahead = (target_day - today.weekday()) % 7
        if explicit_next and days_ahead == 0:
            days_ahead = 7
        return today + timedelta(days=days_ahead)

    @staticmethod
    def _aware(now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now(timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)


def add_one_hour(instant: str) -> str:
    """End time for a start instant; every event is one hour long."""
    return to_iso_utc(parse_iso(instant) + timedelta(hours=1))


def normalize(fragment: str, now: Optional[datetime] = None, timezone_hint: Optional[str] = None) -> str:
    return TimeNormalizer().normalize(fragment, now, timezone_hint)
