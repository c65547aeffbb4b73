import re
import pytz
from typing import Optional, Tuple
from datetime import datetime, timezone

from ..utils.logger import logger


class TimezoneManager:
    # Fixed UTC offsets in hours; no daylight-saving adjustment for the chat tokens
    TIMEZONE_OFFSETS = {
        'CAT': 2,
        'SAST': 2,
        'EST': -5,
        'PST': -8,
    }

    TOKEN_RE = re.compile(r'\b(CAT|SAST|EST|PST)\b', re.IGNORECASE)

    @staticmethod
    def detect_timezone_from_text(text: str) -> Optional[str]:
        if not text:
            return None

        match = TimezoneManager.TOKEN_RE.search(text)
        if match:
            abbrev = match.group(1).upper()
            logger.info(f"Detected timezone {abbrev} from text")
            return abbrev

        return None

    @staticmethod
    def offset_for_hint(hint: Optional[str], at: Optional[datetime] = None) -> int:
        """
        UTC offset in whole hours for an abbreviation from the fixed table or an
        IANA zone name. Unknown or missing hints resolve to UTC.
        """
        if not hint:
            return 0

        abbrev = hint.strip().upper()
        if abbrev in TimezoneManager.TIMEZONE_OFFSETS:
            return TimezoneManager.TIMEZONE_OFFSETS[abbrev]

        try:
            zone = pytz.timezone(hint.strip())
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone hint '{hint}', using UTC")
            return 0

        reference = at or datetime.now(timezone.utc)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=timezone.utc)
        offset = reference.astimezone(zone).utcoffset()
        return int(offset.total_seconds() // 3600)

    @staticmethod
    def resolve_offset(text: str, hint: Optional[str] = None, at: Optional[datetime] = None) -> Tuple[int, str]:
        """
        Offset for a time fragment: an explicit token in the text wins over the
        caller's hint, and UTC is the default.

        Returns:
            (offset_hours, label)
        """
        token = TimezoneManager.detect_timezone_from_text(text)
        if token:
            return TimezoneManager.TIMEZONE_OFFSETS[token], token

        if hint:
            return TimezoneManager.offset_for_hint(hint, at), hint

        return 0, 'UTC'

    @staticmethod
    def strip_timezone_tokens(text: str) -> str:
        return TimezoneManager.TOKEN_RE.sub('', text)
