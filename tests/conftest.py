"""Test fixtures for the Executive Assistant backend."""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

# Set test environment before importing app modules
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("SUPABASE_URL", "http://collaborators.test")
os.environ.setdefault("ENVIRONMENT", "testing")

from assistant.agent.services import AssistantServices
from assistant.schemas import EmailMeta


# Sunday, 18 October 2026, noon UTC
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time for relative dates."""
    return NOW


@pytest.fixture
def fake_calendar():
    """Calendar integration client that books successfully."""
    calendar = AsyncMock()
    calendar.create_event.return_value = {
        "event": {"id": "evt-1"},
        "provider": "google",
        "calendarUrl": "https://calendar.google.com/calendar/event?eid=evt-1",
    }
    return calendar


@pytest.fixture
def fake_email():
    """Email integration client with an empty inbox."""
    email = AsyncMock()
    email.get_emails.return_value = []
    return email


@pytest.fixture
def fake_completion():
    """Completion client returning a fixed reply."""
    completion = AsyncMock()
    completion.complete.return_value = "Here are your drafts."
    return completion


@pytest.fixture
def services(fake_calendar, fake_email, fake_completion):
    """Engine services wired to the fake collaborators."""
    return AssistantServices(calendar=fake_calendar, email=fake_email, completion=fake_completion)


@pytest.fixture
def unread_emails():
    """Five unread emails as returned by the email client."""
    return [
        EmailMeta(
            id=f"msg-{i}",
            sender=f"person{i}@example.com",
            subject=f"Subject {i}",
            body_preview=f"Body of email {i}",
            received_at=f"2026-10-1{i}T08:00:00Z",
        )
        for i in range(1, 6)
    ]
