"""Tests for the meeting title validation gate."""

from datetime import datetime, timezone

import pytest

from assistant.tools.timezone import TimezoneManager
from assistant.tools.validation import TitleValidator


@pytest.fixture
def validator():
    return TitleValidator()


# --- Rejections ---


@pytest.mark.parametrize("candidate,reason", [
    ("x", "too_short"),
    ("Can you book it", "question_phrase"),
    ("should I invite Sam", "question_phrase"),
    ("please could we meet", "question_phrase"),
    ("they said Monday", "pronoun_start"),
    ("schedule a meeting", "scheduling_words_only"),
    ("the", "scheduling_words_only"),
    ("tomorrow", "time_or_location_word"),
    ("office", "time_or_location_word"),
    ("3pm", "bare_time"),
    ("10:30", "bare_time"),
    ("thanks", "acknowledgement"),
])
def test_rejected_candidates(validator, candidate, reason):
    result = validator.validate(candidate)
    assert not result
    assert result.error_type == reason


def test_empty_candidate(validator):
    assert validator.validate(None).error_type == "empty"


@pytest.mark.parametrize("candidate", ["Budget review", "1:1 with Sarah", "Q3 roadmap", "Itinerary check"])
def test_accepted_candidates(validator, candidate):
    result = validator.validate(candidate)
    assert result
    assert result.value == candidate


# --- Final normalization ---


def test_strips_stray_symbols(validator):
    assert validator.normalize_final("  --budget review!!  ") == "budget review"


def test_keeps_business_punctuation(validator):
    assert validator.normalize_final("R&D sync (Q3)") == "R&D sync (Q3)"
    assert validator.normalize_final("Growth +10%") == "Growth +10%"


def test_collapses_whitespace(validator):
    assert validator.normalize_final("Team    sync") == "Team sync"


def test_keeps_original_casing(validator):
    assert validator.normalize_final("iOS release sync") == "iOS release sync"


@pytest.mark.parametrize("title", [None, "", "x", "!!!", "a" * 101])
def test_rejected_final_titles(validator, title):
    assert validator.normalize_final(title) is None


# --- Timezone detection ---


def test_detects_timezone_token():
    assert TimezoneManager.detect_timezone_from_text("5pm cat") == "CAT"
    assert TimezoneManager.detect_timezone_from_text("concatenate at 5pm") is None


def test_iana_offset_follows_daylight_saving():
    winter = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
    summer = datetime(2026, 7, 15, 12, 0, tzinfo=timezone.utc)
    assert TimezoneManager.offset_for_hint("America/New_York", winter) == -5
    assert TimezoneManager.offset_for_hint("America/New_York", summer) == -4


def test_unknown_hint_is_utc():
    assert TimezoneManager.offset_for_hint("Mars/Olympus_Mons") == 0


def test_text_token_beats_hint():
    assert TimezoneManager.resolve_offset("3pm PST", "CAT") == (-8, "PST")
    assert TimezoneManager.resolve_offset("3pm", "CAT") == (2, "CAT")
    assert TimezoneManager.resolve_offset("3pm") == (0, "UTC")
