from typing import Optional
import re

from ..utils.logger import logger
from ..utils.time_utils import CLOCK_PATTERN

class ValidationResult:
    def __init__(self, is_valid: bool, error_type: Optional[str] = None, value: Optional[str] = None):
        self.is_valid = is_valid
        self.error_type = error_type
        self.value = value

    def __bool__(self) -> bool:
        return self.is_valid

class TitleValidator:
    MIN_LENGTH = 2
    MAX_LENGTH = 100

    QUESTION_OPENERS = re.compile(r"^(?:can|could|would|will)\s+you\b|^should\s+i\b|^please\s+could\b", re.IGNORECASE)
    PRONOUN_OPENERS = re.compile(r"^(?:you|they|he|she|it)\s", re.IGNORECASE)
    BARE_NUMERIC_TIME = re.compile(r"^(?:\d{1,2}(?::\d{2})?\s*(?:[ap]\.?\s?m\.?)?|" + CLOCK_PATTERN + r")$", re.IGNORECASE)

    # A candidate built only from these words carries no subject
    FILLER_WORDS = {
        'schedule', 'book', 'create', 'plan', 'arrange', 'set', 'setup', 'organize', 'organise',
        'a', 'an', 'the', 'please', 'meeting', 'meet', 'call', 'session', 'appointment',
        'new', 'quick', 'brief', 'urgent', 'i', 'want', 'would', 'like', 'to', 'need',
        "let's", 'lets', 'let', 'us', 'me', 'for', 'about', 'with', 'my', 'our', 'some',
        'up', 'one', 'another', 'and', 'can', 'we', 'you', 'could', 'will', 'just', 'help',
        'hi', 'hello', 'hey', 'there',
    }

    TIME_AND_LOCATION_WORDS = {
        'today', 'tomorrow', 'tonight', 'morning', 'afternoon', 'evening', 'night', 'noon',
        'midnight', 'now', 'later', 'soon', 'next week', 'this week', 'weekend',
        'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
        'here', 'there', 'office', 'online', 'zoom', 'teams', 'remote', 'home',
    }

    ACKNOWLEDGEMENTS = {
        'hi', 'hello', 'hey', 'ok', 'okay', 'yes', 'no', 'yeah', 'yep', 'nope', 'sure',
        'thanks', 'thank you', 'cool', 'great', 'hmm', 'confirm', 'correct',
    }

    def validate(self, candidate: Optional[str]) -> ValidationResult:
        if not candidate:
            return ValidationResult(is_valid=False, error_type="empty")

        value = candidate.strip()
        lower = value.lower().rstrip('?.!')

        if len(value) < self.MIN_LENGTH:
            return self._reject(value, "too_short")

        if self.QUESTION_OPENERS.search(value):
            return self._reject(value, "question_phrase")

        if self.PRONOUN_OPENERS.search(value):
            return self._reject(value, "pronoun_start")

        words = re.findall(r"[a-z']+", lower)
        if words and all(word in self.FILLER_WORDS for word in words) and not re.search(r'\d', lower):
            return self._reject(value, "scheduling_words_only")

        if lower in self.TIME_AND_LOCATION_WORDS:
            return self._reject(value, "time_or_location_word")

        if self.BARE_NUMERIC_TIME.match(lower):
            return self._reject(value, "bare_time")

        if lower in self.ACKNOWLEDGEMENTS:
            return self._reject(value, "acknowledgement")

        return ValidationResult(is_valid=True, value=value)

    def normalize_final(self, title: Optional[str]) -> Optional[str]:
        """
        Last pass over an accepted or carried-over title: drop stray symbols
        at the edges, keep business punctuation, enforce the length window.
        """
        if not title:
            return None

        value = re.sub(r"^[^\w\"'(\[]+", '', title)
        value = re.sub(r"[^\w)\]%+#&'\"]+$", '', value)
        value = re.sub(r'\s+', ' ', value).strip()

        if len(value) < self.MIN_LENGTH or len(value) > self.MAX_LENGTH:
            logger.info(f"Title '{value}' outside length window, dropping")
            return None

        if not re.search(r'[A-Za-z0-9]', value):
            logger.info(f"Title '{value}' is punctuation only, dropping")
            return None

        return value

    def _reject(self, value: str, reason: str) -> ValidationResult:
        logger.debug(f"Rejected title candidate '{value}': {reason}")
        return ValidationResult(is_valid=False, error_type=reason)
