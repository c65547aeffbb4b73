"""LangGraph dialogue engine for the executive assistant."""

from .graph import assistant_agent, run_turn, create_assistant_agent
from .intent import Intent, classify
from .services import AssistantServices
from .state import (
    ConversationState,
    Idle,
    MeetingGathering,
    MeetingReadyToConfirm,
    EmailAwaitingConfirmation,
    EmailAutoDrafting,
    parse_conversation_state,
)

__all__ = [
    "assistant_agent",
    "run_turn",
    "create_assistant_agent",
    "Intent",
    "classify",
    "AssistantServices",
    "ConversationState",
    "Idle",
    "MeetingGathering",
    "MeetingReadyToConfirm",
    "EmailAwaitingConfirmation",
    "EmailAutoDrafting",
    "parse_conversation_state"
]
