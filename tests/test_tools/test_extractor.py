"""Tests for rule-based meeting detail extraction."""

import pytest

from assistant.tools.extractor import DetailExtractor, TIME_RULES, TITLE_RULES, extract


@pytest.fixture
def extractor():
    return DetailExtractor()


# --- Comma fast path ---


def test_comma_fast_path_resolves_both_fields(extractor):
    """'<title>, <time>' fills both fields in one call."""
    assert extractor.extract("Sales review, tomorrow 5pm", {}) == {
        "title": "Sales review",
        "time": "tomorrow 5pm",
    }


def test_comma_fast_path_strips_scheduling_verb(extractor):
    result = extractor.extract("Schedule budget planning, friday at 10am", {})
    assert result == {"title": "budget planning", "time": "friday at 10am"}


def test_comma_without_time_is_not_fast_path(extractor):
    result = extractor.extract("Hi, can you schedule a meeting", {})
    assert result == {"title": None, "time": None}


# --- Time rules ---


def test_day_then_time(extractor):
    assert extractor.extract_time("Team sync tomorrow 2pm") == "tomorrow 2pm"


def test_time_then_day(extractor):
    assert extractor.extract_time("Retro at 4pm on Friday") == "4pm on Friday"


def test_explicit_clock_without_day(extractor):
    assert extractor.extract_time("Standup 9:30am please") == "9:30am"


def test_at_time_keeps_day_from_elsewhere(extractor):
    assert extractor.extract_time("Tomorrow I need a review at 3pm") == "Tomorrow 3pm"


def test_bare_day_word(extractor):
    assert extractor.extract_time("Design review tomorrow") == "tomorrow"


def test_relative_week(extractor):
    assert extractor.extract_time("Planning sometime next month") == "next month"


def test_no_time(extractor):
    assert extractor.extract_time("Quarterly planning") is None


def test_rule_chains_are_ordered():
    assert [rule.name for rule in TIME_RULES][:2] == ["explicit_clock", "day_then_time"]
    assert TITLE_RULES[0].name == "quoted"
    assert TITLE_RULES[-1].name == "catch_all"


# --- Title rules ---


def test_catch_all_title(extractor):
    assert extractor.extract("Team sync tomorrow 2pm", {}) == {"title": "Team sync", "time": "tomorrow 2pm"}


def test_quoted_title(extractor):
    result = extractor.extract('Book "Q3 roadmap" for friday 10am', {})
    assert result == {"title": "Q3 roadmap", "time": "friday 10am"}


def test_meeting_preposition_title(extractor):
    result = extractor.extract("Set up a meeting about budget planning tomorrow at 10am", {})
    assert result == {"title": "budget planning", "time": "tomorrow at 10am"}


def test_labelled_title(extractor):
    result = extractor.extract("subject: vendor contract", {})
    assert result["title"] == "vendor contract"


def test_discussion_title(extractor):
    result = extractor.extract("We need to discuss the hiring plan", {})
    assert result["title"] == "hiring plan"


def test_question_is_not_a_title(extractor):
    """Request phrasing never becomes a title."""
    assert extractor.extract("Can you help me?", {})["title"] is None


def test_scheduling_words_only(extractor):
    assert extractor.extract("Schedule a meeting", {}) == {"title": None, "time": None}


def test_preposition_before_time_is_removed(extractor):
    """The word introducing the time leaves with it."""
    result = extractor.extract("schedule a meeting at 3pm tomorrow with the board", {})
    assert result == {"title": "meeting with the board", "time": "3pm tomorrow"}


def test_stacked_prefixes_are_all_stripped(extractor):
    """Article, adjective and meeting phrase are peeled off in any order."""
    result = extractor.extract("Arrange a brief session regarding onboarding, Friday", {})
    assert result == {"title": "onboarding", "time": "Friday"}


def test_bare_leading_meeting_noun_dropped(extractor):
    result = extractor.extract("Schedule a session onboarding walkthrough tomorrow", {})
    assert result == {"title": "onboarding walkthrough", "time": "tomorrow"}


def test_title_casing_is_preserved(extractor):
    assert extractor.extract("title: iOS release sync", {})["title"] == "iOS release sync"


# --- Merging with prior details ---


def test_prior_title_is_kept(extractor):
    result = extractor.extract("tomorrow at 3pm", {"title": "Budget review", "time": None})
    assert result == {"title": "Budget review", "time": "tomorrow at 3pm"}


def test_prior_time_is_kept(extractor):
    result = extractor.extract("Quarterly planning", {"title": None, "time": "friday 10am"})
    assert result == {"title": "Quarterly planning", "time": "friday 10am"}


def test_known_fields_not_overwritten(extractor):
    prior = {"title": "Budget review", "time": "friday 10am"}
    assert extractor.extract("Team sync tomorrow 2pm", prior) == prior


@pytest.mark.parametrize("message", [
    "Sales review, tomorrow 5pm",
    "Team sync tomorrow 2pm",
    "Set up a meeting about budget planning tomorrow at 10am",
])
def test_re_extraction_is_idempotent(message):
    """Feeding the result back in never changes the title."""
    first = extract(message, {})
    assert extract(message, first)["title"] == first["title"]


def test_empty_message_keeps_prior(extractor):
    assert extractor.extract("", {"title": "Budget review", "time": None}) == {"title": "Budget review", "time": None}
