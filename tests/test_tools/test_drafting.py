"""Tests for batched reply drafting."""

import pytest

from assistant.exceptions import CollaboratorError
from assistant.schemas import EmailMeta
from assistant.tools.drafting import DRAFT_FAILURE_MESSAGE, DRAFT_SYSTEM_PROMPT, DraftBatcher
from assistant.utils.config import settings


@pytest.mark.asyncio
async def test_drafts_requested_slice(fake_completion, unread_emails):
    """Only emails in [start, start + size) are sent."""
    batcher = DraftBatcher(completion=fake_completion)
    text = await batcher.draft_batch(unread_emails, 2, 2)

    assert text == "Here are your drafts."
    messages = fake_completion.complete.call_args.args[0]
    assert messages[0] == {"role": "system", "content": DRAFT_SYSTEM_PROMPT}
    content = messages[1]["content"]
    assert "Email 3" in content and "Email 4" in content
    assert "Email 2" not in content and "Email 5" not in content
    assert "From: person3@example.com" in content
    assert "Subject: Subject 4" in content


@pytest.mark.asyncio
async def test_uses_draft_budget(fake_completion, unread_emails):
    await DraftBatcher(completion=fake_completion).draft_batch(unread_emails, 0, 2)
    kwargs = fake_completion.complete.call_args.kwargs
    assert kwargs == {"max_tokens": settings.draft_max_tokens, "temperature": settings.draft_temperature}


@pytest.mark.asyncio
async def test_last_partial_batch(fake_completion, unread_emails):
    await DraftBatcher(completion=fake_completion).draft_batch(unread_emails, 4, 2)
    content = fake_completion.complete.call_args.args[0][1]["content"]
    assert "Email 5" in content
    assert "Email 4" not in content


def test_context_block_truncates_body(fake_completion):
    email = EmailMeta(id="long", sender="a@example.com", subject="Long", body_preview="x" * 1000)
    block = DraftBatcher(completion=fake_completion).context_block(1, email)
    assert "x" * 400 + "..." in block
    assert "x" * 401 not in block


def test_context_block_localizes_received_time(fake_completion):
    email = EmailMeta(id="1", subject="Hello", received_at="2026-10-18T08:00:00Z")
    block = DraftBatcher(completion=fake_completion, display_timezone="Africa/Johannesburg").context_block(1, email)
    assert "Received: Sunday, October 18 at 10:00 AM SAST" in block
    assert "From: Unknown sender" in block


def test_context_block_keeps_unparseable_time(fake_completion):
    email = EmailMeta(id="1", subject="Hello", received_at="last tuesday-ish")
    block = DraftBatcher(completion=fake_completion).context_block(1, email)
    assert "Received: last tuesday-ish" in block


@pytest.mark.asyncio
async def test_failure_returns_apology(fake_completion, unread_emails):
    """Collaborator failures never propagate."""
    fake_completion.complete.side_effect = CollaboratorError("timeout", "Completion request timed out")
    text = await DraftBatcher(completion=fake_completion).draft_batch(unread_emails, 0, 2)
    assert text == DRAFT_FAILURE_MESSAGE
