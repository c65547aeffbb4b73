"""
LangGraph agent nodes - one entry node that classifies the message and one
handler node per conversation flow.

Each node reads the parsed conversation state from ``state["conversation"]``
and returns the reply text plus the wire-format state for the next turn.
Collaborator failures are turned into apologies here; anything else
propagates to the HTTP boundary.
"""

import re
from typing import Any, Dict

from langchain_core.runnables import RunnableConfig

from .intent import Intent, classify
from .prompts import (
    GENERAL_CHAT_PROMPT,
    MISSING_BOTH_PROMPT,
    MISSING_TITLE_PROMPT,
    MISSING_TIME_PROMPT,
    CONFIRMATION_PROMPT,
    LOOP_RESET_MESSAGE,
    MEETING_CANCELLED_MESSAGE,
    NO_UNREAD_EMAILS_MESSAGE,
    UNREAD_EMAILS_HEADER,
    UNREAD_EMAILS_MORE,
    DRAFT_OFFER_PROMPT,
    DRAFT_OFFER_REPROMPT,
    DRAFT_NEXT_PROMPT,
    DRAFT_CONTINUE_REPROMPT,
    DRAFTS_COMPLETE_MESSAGE,
    DRAFTS_DECLINED_MESSAGE,
    DRAFTS_CANCELLED_MESSAGE,
    EMAIL_AUTH_MESSAGE,
    EMAIL_FAILURE_MESSAGE,
    CHAT_FAILURE_MESSAGE,
)
from .services import AssistantServices, get_default_services
from .state import (
    TurnState,
    MeetingGathering,
    MeetingReadyToConfirm,
    MeetingState,
    EmailAwaitingConfirmation,
    EmailAutoDrafting,
)
from ..exceptions import CollaboratorError
from ..schemas import MeetingDetails, PartialDetails
from ..tools.drafting import DRAFT_FAILURE_MESSAGE
from ..utils.config import settings
from ..utils.logger import logger


# Re-entries into the meeting flow allowed before the hard reset
MAX_MEETING_LOOPS = 3

# Emails listed in the unread summary
EMAIL_LIST_LIMIT = 5

MEETING_CANCEL_RE = re.compile(r'\b(?:cancel|never\s*mind|forget\s+it|stop)\b', re.IGNORECASE)

# "no problem", "no rush" and the like are reassurance, not refusal
BARE_NO = r"no(?!\s+(?:problem|problems|worries|rush|hurry)\b)"

DRAFT_YES_RE = re.compile(r'\b(?:yes|yeah|yep|sure|ok|okay|go\s+ahead|please\s+do)\b', re.IGNORECASE)
DRAFT_NO_RE = re.compile(rf'\b(?:{BARE_NO}|nope|cancel|stop|not\s+now|skip)\b', re.IGNORECASE)
DRAFT_NEXT_RE = re.compile(r'\b(?:next|continue|more|go\s+on)\b', re.IGNORECASE)
DRAFT_CANCEL_RE = re.compile(rf'\b(?:cancel|stop|done|quit|exit|{BARE_NO})\b', re.IGNORECASE)


def get_services(config: RunnableConfig) -> AssistantServices:
    configurable = (config or {}).get("configurable") or {}
    return configurable.get("services") or get_default_services()


def _reply(response: str, next_state: Dict[str, Any]) -> Dict[str, Any]:
    return {"response": response, "next_state": next_state}


# ============================================================================
# ENTRY
# ============================================================================

async def classify_message(state: TurnState, config: RunnableConfig) -> Dict[str, Any]:
    logger.info("Node: classify")
    intent = classify(state["message"], state["conversation"])
    return {"intent": intent.value}


# ============================================================================
# MEETING FLOW
# ============================================================================

async def handle_meeting(state: TurnState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Gather meeting title and time across turns.

    The first entry stores loopCount 0; each further turn inside the
    meeting flow adds one, and a count above MAX_MEETING_LOOPS resets.
    """
    logger.info("Node: meeting")
    services = get_services(config)
    conversation = state["conversation"]
    message = state["message"]

    if isinstance(conversation, MeetingState):
        if MEETING_CANCEL_RE.search(message):
            logger.info("🛑 Meeting request cancelled by user")
            return _reply(MEETING_CANCELLED_MESSAGE, {})
        loop_count = conversation.loop_count + 1
        partial = conversation.partial
    else:
        loop_count = 0
        partial = PartialDetails()

    if loop_count > MAX_MEETING_LOOPS:
        logger.warning(f"🔁 Meeting flow re-entered {loop_count} times, starting fresh")
        return _reply(LOOP_RESET_MESSAGE, {})

    extracted = services.extractor.extract(message, partial.model_dump())
    title, time = extracted.get("title"), extracted.get("time")

    if title and time:
        details = MeetingDetails(title=title, time=time)
        ready = MeetingReadyToConfirm(loop_count=loop_count, details=details)
        logger.info(f"✅ Meeting details complete: {details.model_dump()}")
        return _reply(CONFIRMATION_PROMPT.format(title=title, time=time), ready.to_wire())

    gathering = MeetingGathering(loop_count=loop_count, partial=PartialDetails(title=title, time=time))
    if title:
        prompt = MISSING_TIME_PROMPT.format(title=title)
    elif time:
        prompt = MISSING_TITLE_PROMPT.format(time=time)
    else:
        prompt = MISSING_BOTH_PROMPT

    logger.info(f"Still gathering meeting details (loop {loop_count}): title={title!r}, time={time!r}")
    return _reply(prompt, gathering.to_wire())


async def handle_confirmation(state: TurnState, config: RunnableConfig) -> Dict[str, Any]:
    logger.info("Node: confirm")
    services = get_services(config)
    conversation = state["conversation"]

    result = await services.confirmation.confirm(
        conversation.details,
        now=state.get("now"),
        auth_header=state.get("auth_header"),
    )
    return _reply(result.response, result.state)


# ============================================================================
# EMAIL FLOW
# ============================================================================

async def handle_email_request(state: TurnState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Fetch unread inbox mail, list it, and offer to draft replies.
    """
    logger.info("Node: email")
    services = get_services(config)

    try:
        emails = await services.email.get_emails("inbox", state.get("auth_header"))
    except CollaboratorError as e:
        logger.error(f"❌ Email fetch failed ({e.kind}): {e}")
        return _reply(EMAIL_AUTH_MESSAGE if e.needs_auth else EMAIL_FAILURE_MESSAGE, {})

    if not emails:
        return _reply(NO_UNREAD_EMAILS_MESSAGE, {})

    lines = [UNREAD_EMAILS_HEADER.format(count=len(emails), plural="" if len(emails) == 1 else "s")]
    for number, email in enumerate(emails[:EMAIL_LIST_LIMIT], start=1):
        lines.append(f"{number}. {email.subject or '(no subject)'} (from {email.sender or 'unknown sender'})")
    if len(emails) > EMAIL_LIST_LIMIT:
        lines.append(UNREAD_EMAILS_MORE.format(count=len(emails) - EMAIL_LIST_LIMIT))
    lines.append("")
    lines.append(DRAFT_OFFER_PROMPT)

    flow = EmailAwaitingConfirmation(emails=tuple(emails))
    return _reply("\n".join(lines), flow.to_wire())


async def handle_draft_flow(state: TurnState, config: RunnableConfig) -> Dict[str, Any]:
    logger.info("Node: draft")
    services = get_services(config)
    flow = state["conversation"]
    message = state["message"]

    if isinstance(flow, EmailAwaitingConfirmation):
        if DRAFT_NO_RE.search(message):
            logger.info("User declined reply drafting")
            return _reply(DRAFTS_DECLINED_MESSAGE, {})
        if DRAFT_YES_RE.search(message):
            return await _draft_next_batch(services, flow.emails, flow.next_index)
        return _reply(DRAFT_OFFER_REPROMPT, flow.to_wire())

    if isinstance(flow, EmailAutoDrafting):
        if DRAFT_CANCEL_RE.search(message):
            logger.info("User stopped reply drafting")
            return _reply(DRAFTS_CANCELLED_MESSAGE, {})
        if DRAFT_NEXT_RE.search(message):
            return await _draft_next_batch(services, flow.emails, flow.next_index)
        return _reply(DRAFT_CONTINUE_REPROMPT, flow.to_wire())

    logger.warning(f"Draft node reached without a draft flow (state={flow.kind})")
    return _reply(DRAFT_CONTINUE_REPROMPT, {})


async def _draft_next_batch(services: AssistantServices, emails, start: int) -> Dict[str, Any]:
    size = settings.draft_batch_size
    text = await services.drafter.draft_batch(emails, start, size)

    if text == DRAFT_FAILURE_MESSAGE:
        return _reply(text, {})

    next_index = min(start + size, len(emails))
    if next_index >= len(emails):
        logger.info(f"✅ Drafted replies for all {len(emails)} email(s)")
        return _reply(text + DRAFTS_COMPLETE_MESSAGE, {})

    remaining = min(size, len(emails) - next_index)
    flow = EmailAutoDrafting(emails=tuple(emails), next_index=next_index)
    return _reply(text + DRAFT_NEXT_PROMPT.format(count=remaining), flow.to_wire())


# ============================================================================
# GENERAL CHAT
# ============================================================================

async def handle_general_chat(state: TurnState, config: RunnableConfig) -> Dict[str, Any]:
    logger.info("Node: chat")
    services = get_services(config)

    messages = [
        {"role": "system", "content": GENERAL_CHAT_PROMPT},
        {"role": "user", "content": state["message"]},
    ]

    try:
        text = await services.completion.complete(
            messages,
            max_tokens=settings.chat_max_tokens,
            temperature=settings.chat_temperature,
        )
    except CollaboratorError as e:
        logger.error(f"❌ Chat completion failed ({e.kind}): {e}")
        return _reply(CHAT_FAILURE_MESSAGE, {})

    return _reply(text or CHAT_FAILURE_MESSAGE, state["conversation"].to_wire())


NODE_FOR_INTENT = {
    Intent.CONFIRMATION.value: "confirm",
    Intent.DRAFT_FLOW_CONTINUATION.value: "draft",
    Intent.MEETING_REQUEST.value: "meeting",
    Intent.EMAIL_REQUEST.value: "email",
    Intent.GENERAL_CHAT.value: "chat",
}
