"""Tests for conversation state parsing and wire format."""

import pytest
from pydantic import ValidationError

from assistant.agent.state import (
    EmailAutoDrafting,
    EmailAwaitingConfirmation,
    Idle,
    MeetingGathering,
    MeetingReadyToConfirm,
    parse_conversation_state,
)
from assistant.schemas import EmailMeta, MeetingDetails, PartialDetails


EMAIL = {"id": "1", "provider": "google", "from": "a@example.com", "subject": "Hi",
         "body_preview": "Hello", "received_at": "2026-10-17T09:00:00Z"}


# --- Parsing ---


@pytest.mark.parametrize("raw", [None, {}, [], "junk", 42])
def test_empty_or_malformed_is_idle(raw):
    assert isinstance(parse_conversation_state(raw), Idle)


def test_gathering():
    state = parse_conversation_state(
        {"loopCount": 2, "meetingContext": True, "partialDetails": {"title": "Budget review", "time": None}}
    )
    assert isinstance(state, MeetingGathering)
    assert state.loop_count == 2
    assert state.partial.title == "Budget review"


def test_ready_to_confirm():
    state = parse_conversation_state({
        "loopCount": 1,
        "meetingContext": True,
        "readyToConfirm": True,
        "meetingDetails": {"title": "Team sync", "time": "tomorrow 2pm"},
    })
    assert isinstance(state, MeetingReadyToConfirm)
    assert state.details.title == "Team sync"


def test_invalid_details_fall_back_to_gathering():
    state = parse_conversation_state({
        "meetingContext": True,
        "readyToConfirm": True,
        "meetingDetails": {"title": "x", "time": ""},
        "partialDetails": {"title": None, "time": "friday"},
    })
    assert isinstance(state, MeetingGathering)
    assert state.partial.time == "friday"


@pytest.mark.parametrize("loop_count", [-3, "abc", None, True])
def test_bad_loop_count_is_zero(loop_count):
    state = parse_conversation_state({"loopCount": loop_count, "meetingContext": True})
    assert state.loop_count == 0


def test_malformed_partial_is_idle():
    assert isinstance(parse_conversation_state({"meetingContext": True, "partialDetails": {"title": 5}}), Idle)


def test_draft_flow_wins_over_meeting():
    """Both flows at once cannot be represented; the draft flow is kept."""
    state = parse_conversation_state({
        "meetingContext": True,
        "partialDetails": {"title": "Team sync", "time": None},
        "emailDraftFlow": {"emails": [EMAIL], "nextIndex": 0, "awaitingConfirmation": True, "autoDrafting": False},
    })
    assert isinstance(state, EmailAwaitingConfirmation)


def test_auto_drafting():
    state = parse_conversation_state(
        {"emailDraftFlow": {"emails": [EMAIL, dict(EMAIL, id="2")], "nextIndex": 1, "autoDrafting": True}}
    )
    assert isinstance(state, EmailAutoDrafting)
    assert state.next_index == 1
    assert state.emails[0].sender == "a@example.com"


def test_next_index_clamped_to_email_count():
    state = parse_conversation_state({"emailDraftFlow": {"emails": [EMAIL], "nextIndex": 9, "autoDrafting": True}})
    assert state.next_index == 1


def test_empty_draft_flow_is_idle():
    assert isinstance(parse_conversation_state({"emailDraftFlow": {"emails": [], "nextIndex": 0}}), Idle)


# --- Wire format ---


def test_idle_wire_is_empty():
    assert Idle().to_wire() == {}


def test_gathering_wire():
    state = MeetingGathering(loop_count=0, partial=PartialDetails())
    assert state.to_wire() == {"loopCount": 0, "meetingContext": True, "partialDetails": {"title": None, "time": None}}


def test_ready_wire_round_trip():
    wire = MeetingReadyToConfirm(loop_count=1, details=MeetingDetails(title="Team sync", time="tomorrow 2pm")).to_wire()
    assert wire["readyToConfirm"] is True
    assert wire["partialDetails"] == wire["meetingDetails"] == {"title": "Team sync", "time": "tomorrow 2pm"}
    assert parse_conversation_state(wire).to_wire() == wire


def test_draft_flow_wire():
    flow = EmailAwaitingConfirmation(emails=(EmailMeta.from_provider(EMAIL),))
    assert flow.to_wire() == {
        "emailDraftFlow": {"emails": [EMAIL], "nextIndex": 0, "awaitingConfirmation": True, "autoDrafting": False}
    }


def test_emails_are_immutable():
    email = EmailMeta.from_provider(EMAIL)
    with pytest.raises(ValidationError):
        email.subject = "Changed"
