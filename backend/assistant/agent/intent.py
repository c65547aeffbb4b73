import re
from enum import Enum
from typing import Any, Dict, Union

from .state import (
    ConversationState,
    DraftFlowState,
    MeetingReadyToConfirm,
    MeetingState,
    parse_conversation_state,
)
from ..utils.logger import logger


class Intent(str, Enum):
    CONFIRMATION = "confirmation"
    DRAFT_FLOW_CONTINUATION = "draft_flow_continuation"
    MEETING_REQUEST = "meeting_request"
    EMAIL_REQUEST = "email_request"
    GENERAL_CHAT = "general_chat"


CONFIRM_RE = re.compile(r'\b(confirm|yes|ok|correct)\b', re.IGNORECASE)

# Plain substrings: "call" also matches "recall", "schedule" matches "rescheduled"
MEETING_KEYWORDS = ("meeting", "schedule", "calendar", "appointment", "call")

EMAIL_PHRASES = ("unread email", "inbox", "show emails", "check email", "new emails", "my emails")


def classify(message: str, state: Union[ConversationState, Dict[str, Any], None] = None) -> Intent:
    """
    Label a message. The order of the checks is significant:
    confirmation, draft-flow continuation, meeting, email, general chat.
    """
    if state is None or isinstance(state, dict):
        state = parse_conversation_state(state or {})

    text = (message or "").lower()

    if isinstance(state, MeetingReadyToConfirm) and CONFIRM_RE.search(text):
        intent = Intent.CONFIRMATION
    elif isinstance(state, DraftFlowState):
        intent = Intent.DRAFT_FLOW_CONTINUATION
    elif any(keyword in text for keyword in MEETING_KEYWORDS) or isinstance(state, MeetingState):
        intent = Intent.MEETING_REQUEST
    elif any(phrase in text for phrase in EMAIL_PHRASES):
        intent = Intent.EMAIL_REQUEST
    else:
        intent = Intent.GENERAL_CHAT

    logger.info(f"🧭 Intent: {intent.value} (state={state.kind})")
    return intent
