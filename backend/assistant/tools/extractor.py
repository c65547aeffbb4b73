"""
Rule-based meeting detail extraction.

Pulls a meeting title and a natural-language time fragment out of a chat
message. Both rule sets are ordered (name, pattern, extractor) chains
evaluated top to bottom; the first rule that yields a value wins. A field
already known from earlier turns is never replaced.
"""

from typing import Callable, List, NamedTuple, Optional, Pattern
import re

from .validation import TitleValidator
from ..utils.logger import logger
from ..utils.time_utils import CLOCK_PATTERN, CLOCK_RE


WEEKDAY_NAMES = r'(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)'
RELATIVE_DAY = r'(?:today|tomorrow|tonight)'
RELATIVE_WEEK = r'(?:(?:next|this)\s+(?:week|month)|end\s+of\s+(?:the\s+)?(?:week|month)|the\s+weekend|this\s+weekend|next\s+weekend)'
TIME_OF_DAY = r'(?:morning|afternoon|evening|night|noon|midday|lunchtime|lunch)'
DAY_PHRASE = rf'(?:{RELATIVE_DAY}|(?:next\s+|this\s+|on\s+)?{WEEKDAY_NAMES}|(?:next|this)\s+week)'
CLOCK = r'\d{1,2}(?::\d{2})?\s*[ap]\.?\s?m\b\.?'

SCHEDULING_VERBS = r'(?:book|schedule|create|plan|arrange|set\s+up|setup|organi[sz]e|add)'
POLITE_PREFIX = r"(?:(?:can|could|would|will)\s+you\s+(?:please\s+)?|please\s+|i\s+(?:want|need|would\s+like|'d\s+like)\s+to\s+|let'?s\s+|help\s+me\s+)*"
MEETING_NOUNS = r'(?:meeting|call|session|appointment)'
LEADING_ADJECTIVES = r'(?:new|quick|brief|urgent)'

DAY_WORD_RE = re.compile(rf'\b(?:{RELATIVE_DAY}|{WEEKDAY_NAMES}|(?:next|this)\s+week)\b', re.IGNORECASE)
TIME_INDICATOR_RE = re.compile(
    rf'{CLOCK_PATTERN}|\b(?:{RELATIVE_DAY}|{WEEKDAY_NAMES}|{TIME_OF_DAY}|next\s+week|this\s+week)\b',
    re.IGNORECASE
)


class ExtractionRule(NamedTuple):
    name: str
    pattern: Pattern
    extract: Callable[[re.Match, str], Optional[str]]


def _group(index: int) -> Callable[[re.Match, str], Optional[str]]:
    return lambda match, text: match.group(index)


def _with_day(match: re.Match, text: str) -> str:
    """Keep a day word from elsewhere in the message next to a lone clock time."""
    value = match.group(1) if match.groups() else match.group(0)
    day = DAY_WORD_RE.search(text)
    if day and day.group(0).lower() not in value.lower():
        return f"{day.group(0)} {value}"
    return value


def _clock_without_day(match: re.Match, text: str) -> Optional[str]:
    if DAY_WORD_RE.search(text):
        return None
    return match.group(0)


def _day_and_clock(match: re.Match, text: str) -> Optional[str]:
    day = DAY_WORD_RE.search(text)
    if not day:
        return None
    return f"{day.group(0)} {match.group(0)}"


TIME_RULES: List[ExtractionRule] = [
    ExtractionRule("explicit_clock", re.compile(CLOCK, re.IGNORECASE), _clock_without_day),
    ExtractionRule(
        "day_then_time",
        re.compile(rf'\b{DAY_PHRASE}(?:\s+{TIME_OF_DAY})?,?\s+(?:at\s+|@\s*|around\s+)?{CLOCK}', re.IGNORECASE),
        _group(0),
    ),
    ExtractionRule(
        "time_then_day",
        re.compile(rf'\b{CLOCK}\s+(?:on\s+)?{DAY_PHRASE}\b', re.IGNORECASE),
        _group(0),
    ),
    ExtractionRule("at_time", re.compile(rf'\bat\s+({CLOCK})', re.IGNORECASE), _with_day),
    ExtractionRule(
        "time_range",
        re.compile(rf'\b\d{{1,2}}(?::\d{{2}})?\s*(?:[ap]\.?\s?m\.?)?\s*[-–]\s*{CLOCK}', re.IGNORECASE),
        _with_day,
    ),
    ExtractionRule("day_and_clock", re.compile(CLOCK, re.IGNORECASE), _day_and_clock),
    ExtractionRule(
        "day_word",
        re.compile(rf'\b{RELATIVE_DAY}(?:\s+{TIME_OF_DAY})?\b', re.IGNORECASE),
        _group(0),
    ),
    ExtractionRule(
        "weekday",
        re.compile(rf'\b(?:next\s+|this\s+)?{WEEKDAY_NAMES}(?:\s+{TIME_OF_DAY})?\b', re.IGNORECASE),
        _group(0),
    ),
    ExtractionRule("relative_week", re.compile(rf'\b{RELATIVE_WEEK}\b', re.IGNORECASE), _group(0)),
]


TITLE_RULES: List[ExtractionRule] = [
    ExtractionRule(
        "quoted",
        re.compile(r'["“]([^"”]{2,100})["”]|(?<![A-Za-z])\'([^\']{2,100})\'(?![A-Za-z])'),
        lambda match, text: match.group(1) or match.group(2),
    ),
    ExtractionRule(
        "labelled",
        re.compile(r'\b(?:title|subject|regarding|topic)\s*:\s*(.+)', re.IGNORECASE),
        _group(1),
    ),
    ExtractionRule(
        "meeting_preposition",
        re.compile(rf'\b{MEETING_NOUNS}\s+(?:for|about|regarding|on|to\s+discuss)\s+(.+)', re.IGNORECASE),
        _group(1),
    ),
    ExtractionRule(
        "scheduling_verb",
        re.compile(
            rf"\b(?:let'?s\s+(?:meet|talk|catch\s+up|sync)|{SCHEDULING_VERBS}\s+(?:a|an|the)?\s*(?:{LEADING_ADJECTIVES}\s+)?{MEETING_NOUNS})\s+"
            r"(?:about|for|on|regarding|to\s+discuss)\s+(.+)",
            re.IGNORECASE
        ),
        _group(1),
    ),
    ExtractionRule(
        "discussion",
        re.compile(r'\b(?:need|want|have)\s+to\s+(?:discuss|talk\s+about|review|go\s+over)\s+(.+)|\bdiscuss(?:ing)?\s+(.+)', re.IGNORECASE),
        lambda match, text: match.group(1) or match.group(2),
    ),
    ExtractionRule(
        "leading_verb",
        re.compile(
            rf'^{POLITE_PREFIX}{SCHEDULING_VERBS}\s+(?:(?:a|an|the)\s+)?(?:{LEADING_ADJECTIVES}\s+)?'
            rf'(?:{MEETING_NOUNS}\s+(?:(?:for|about)\s+|(?!with\b)))?(.+)',
            re.IGNORECASE
        ),
        _group(1),
    ),
    ExtractionRule(
        "catch_all",
        re.compile(r'^(.+)$', re.DOTALL),
        lambda match, text: re.sub(rf'(?:^|\s+){MEETING_NOUNS}\s*$', '', match.group(1), flags=re.IGNORECASE),
    ),
]


class DetailExtractor:
    def __init__(self, validator: Optional[TitleValidator] = None):
        self.validator = validator or TitleValidator()

    def extract(self, message: str, prior: Optional[dict] = None) -> dict:
        prior = prior or {}
        title = prior.get("title")
        time = prior.get("time")
        text = (message or '').strip()

        if not text:
            return {"title": self.validator.normalize_final(title), "time": time}

        # Comma fast path: "<title>, <time>"
        fast = self._comma_split(text)
        if fast:
            fast_title, fast_time = fast
            title = title or fast_title
            time = time or fast_time
            if title and time:
                logger.info(f"⚡ Comma fast path: title='{title}', time='{time}'")
                return {"title": self.validator.normalize_final(title), "time": time}

        if not time:
            time = self.extract_time(text)

        if not title:
            cleaned = self.clean_for_title(text, time)
            title = self.extract_title(cleaned)

        result = {"title": self.validator.normalize_final(title), "time": time}
        logger.info(f"📋 Extracted details: {result}")
        return result

    def extract_time(self, text: str) -> Optional[str]:
        for rule in TIME_RULES:
            match = rule.pattern.search(text)
            if not match:
                continue
            value = rule.extract(match, text)
            if value:
                value = re.sub(r'\s+', ' ', value).strip(' ,')
                logger.debug(f"Time rule '{rule.name}' matched: '{value}'")
                return value
        return None

    def extract_title(self, cleaned: str) -> Optional[str]:
        if not cleaned:
            return None

        for rule in TITLE_RULES:
            match = rule.pattern.search(cleaned)
            if not match:
                continue
            candidate = rule.extract(match, cleaned)
            candidate = self.post_clean(candidate)
            if self.validator.validate(candidate):
                logger.debug(f"Title rule '{rule.name}' accepted: '{candidate}'")
                return candidate
        return None

    def clean_for_title(self, text: str, time: Optional[str]) -> str:
        cleaned = re.sub(r'^(?:hi|hello|hey)(?:\s+there)?\s*[,!.]?\s+', '', text, flags=re.IGNORECASE)
        if time:
            cleaned = re.sub(rf'(?:\b(?:at|on|for|around|by)\s+|@\s*)?{re.escape(time)}', ' ', cleaned, flags=re.IGNORECASE)

        cleaned = re.sub(rf'\b\d{{1,2}}(?::\d{{2}})?\s*(?:[ap]\.?\s?m\.?)?\s*[-–]\s*{CLOCK}', ' ', cleaned, flags=re.IGNORECASE)
        cleaned = re.sub(rf'(?:\b(?:at|around|by)\s+|@\s*)?{CLOCK}', ' ', cleaned, flags=re.IGNORECASE)
        cleaned = CLOCK_RE.sub(' ', cleaned)
        cleaned = re.sub(rf'\b(?:(?:on|for|by)\s+)?(?:next\s+|this\s+)?(?:{RELATIVE_DAY}|{WEEKDAY_NAMES})(?:\s+{TIME_OF_DAY})?\b', ' ', cleaned, flags=re.IGNORECASE)
        cleaned = re.sub(rf'\b{RELATIVE_WEEK}\b', ' ', cleaned, flags=re.IGNORECASE)
        cleaned = re.sub(r'\b(?:CAT|SAST|EST|PST)\b', ' ', cleaned)
        cleaned = re.sub(r'\s*,\s*(?=,|$)', ' ', cleaned)
        cleaned = re.sub(r'\s+,', ',', cleaned)
        cleaned = re.sub(r'\s+', ' ', cleaned).strip(' ,')

        # Dangling prepositions left behind by the removed time ("... at", "... on")
        previous = None
        while previous != cleaned:
            previous = cleaned
            cleaned = re.sub(r'\s+(?:at|on|for|by|from|in|around|@)\s*([?.!]*)$', r'\1', cleaned, flags=re.IGNORECASE).strip(' ,')

        return cleaned

    @staticmethod
    def post_clean(candidate: Optional[str]) -> Optional[str]:
        if not candidate:
            return None

        value = candidate.strip()
        previous = None
        while previous != value:
            previous = value
            value = re.sub(r'^(?:a|an|the)\s+', '', value, flags=re.IGNORECASE)
            value = re.sub(rf'^{MEETING_NOUNS}\s+(?:for|about|regarding|on|to\s+discuss)\s+', '', value, flags=re.IGNORECASE)
            value = re.sub(rf'^{LEADING_ADJECTIVES}\s+', '', value, flags=re.IGNORECASE)
        value = re.sub(rf'(?:^|\s+){MEETING_NOUNS}\s*([?.!,;:]*)$', r'\1', value, flags=re.IGNORECASE)
        value = re.sub(r'[\s.,;:!?-]+$', '', value)
        value = re.sub(r'\s+', ' ', value).strip()
        return value or None

    def _comma_split(self, text: str) -> Optional[tuple]:
        match = re.match(r'^\s*([^,]+?)\s*,\s*(.+?)\s*$', text, re.DOTALL)
        if not match:
            return None

        segment_a, segment_b = match.group(1), match.group(2)
        if not TIME_INDICATOR_RE.search(segment_b):
            return None

        title = re.sub(rf'^{POLITE_PREFIX}{SCHEDULING_VERBS}\s+', '', segment_a, flags=re.IGNORECASE)
        title = self.post_clean(title)
        if not title or len(title) < 2 or not self.validator.validate(title):
            return None

        time = self.extract_time(segment_b) or segment_b.strip(' .!')
        return title, time


def extract(message: str, prior: Optional[dict] = None) -> dict:
    return DetailExtractor().extract(message, prior)
