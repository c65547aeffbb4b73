from typing import List, Optional, Sequence

from .completion import CompletionClient
from ..exceptions import CollaboratorError
from ..schemas import EmailMeta
from ..utils.config import settings
from ..utils.logger import logger
from ..utils.time_utils import format_for_display


BODY_PREVIEW_LIMIT = 400

DRAFT_SYSTEM_PROMPT = """You are an executive assistant drafting email replies on behalf of the user.

For every email you are given, write one short, professional reply.

Output format (strict, nothing before or after):
N) Subject: Re: <original subject>
Draft reply: <reply text>

Rules:
- Number the replies in the order the emails are given, starting at the number shown for each email
- Keep each reply under 120 words
- Do not invent facts, dates or commitments that are not in the email
- Leave a blank line between replies"""

DRAFT_FAILURE_MESSAGE = "Sorry, I couldn't draft replies for these emails right now. Please try again in a moment."


class DraftBatcher:
    """Drafts replies for a slice of unread emails via the completion collaborator."""

    def __init__(self, completion: Optional[CompletionClient] = None, display_timezone: Optional[str] = None):
        self.completion = completion or CompletionClient()
        self.display_timezone = display_timezone or settings.display_timezone

    def context_block(self, number: int, email: EmailMeta) -> str:
        preview = email.body_preview or ""
        if len(preview) > BODY_PREVIEW_LIMIT:
            preview = preview[:BODY_PREVIEW_LIMIT].rstrip() + "..."

        received = "unknown"
        if email.received_at:
            try:
                received = format_for_display(email.received_at, self.display_timezone)
            except (ValueError, OverflowError):
                logger.warning(f"Could not parse received time '{email.received_at}' for email {email.id}")
                received = email.received_at

        return (
            f"Email {number}\n"
            f"From: {email.sender or 'Unknown sender'}\n"
            f"Subject: {email.subject or '(no subject)'}\n"
            f"Received: {received}\n"
            f"Body: {preview}"
        )

    async def draft_batch(self, emails: Sequence[EmailMeta], start: int, size: Optional[int] = None) -> str:
        size = size or settings.draft_batch_size
        batch: List[EmailMeta] = list(emails[start:start + size])
        if not batch:
            return "There are no more emails to draft replies for."

        blocks = [self.context_block(start + i + 1, email) for i, email in enumerate(batch)]
        messages = [
            {"role": "system", "content": DRAFT_SYSTEM_PROMPT},
            {"role": "user", "content": "Draft replies for these emails:\n\n" + "\n\n".join(blocks)},
        ]

        logger.info(f"✍️ Drafting replies for emails {start + 1}-{start + len(batch)} of {len(emails)}")
        try:
            return await self.completion.complete(
                messages,
                max_tokens=settings.draft_max_tokens,
                temperature=settings.draft_temperature,
            )
        except CollaboratorError as e:
            logger.error(f"❌ Draft generation failed ({e.kind}): {e}")
            return DRAFT_FAILURE_MESSAGE
