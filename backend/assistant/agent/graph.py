from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from langgraph.graph import StateGraph, END

from .state import TurnState, parse_conversation_state
from .nodes import (
    classify_message,
    handle_meeting,
    handle_confirmation,
    handle_email_request,
    handle_draft_flow,
    handle_general_chat,
    NODE_FOR_INTENT,
)
from .services import AssistantServices, get_default_services
from ..utils.logger import logger


def route_intent(state: TurnState) -> Literal["meeting", "confirm", "email", "draft", "chat"]:
    node = NODE_FOR_INTENT.get(state.get("intent"), "chat")
    logger.info(f"Routing: classify -> {node}")
    return node


def create_assistant_agent():
    workflow = StateGraph(TurnState)

    workflow.add_node("classify", classify_message)
    workflow.add_node("meeting", handle_meeting)
    workflow.add_node("confirm", handle_confirmation)
    workflow.add_node("email", handle_email_request)
    workflow.add_node("draft", handle_draft_flow)
    workflow.add_node("chat", handle_general_chat)

    workflow.set_entry_point("classify")

    workflow.add_conditional_edges(
        "classify",
        route_intent,
        {
            "meeting": "meeting",
            "confirm": "confirm",
            "email": "email",
            "draft": "draft",
            "chat": "chat"
        }
    )

    # Every handler produces the reply for this turn; the next message starts a new run
    for node in ("meeting", "confirm", "email", "draft", "chat"):
        workflow.add_edge(node, END)

    app = workflow.compile()
    logger.info("Compiled assistant agent workflow")
    return app


assistant_agent = create_assistant_agent()


async def run_turn(
    message: str,
    conversation_state: Optional[Dict[str, Any]] = None,
    session_id: Optional[str] = None,
    auth_header: Optional[str] = None,
    now: Optional[datetime] = None,
    services: Optional[AssistantServices] = None,
) -> Dict[str, Any]:
    """
    Run one conversation turn.

    Args:
        message: The user's chat message
        conversation_state: The ``state`` returned by the previous turn ({} to start)
        session_id: Opaque caller session id, only used for log correlation
        auth_header: Bearer token forwarded to the calendar/email collaborators
        now: Reference time for resolving relative dates (defaults to the current UTC time)
        services: Collaborators to use instead of the default clients

    Returns:
        {"response": str, "state": dict}
    """
    conversation = parse_conversation_state(conversation_state or {})
    logger.info(f"💬 Turn start (session={session_id or '-'}, state={conversation.kind})")

    initial: TurnState = {
        "message": message,
        "conversation": conversation,
        "intent": None,
        "response": "",
        "next_state": {},
        "auth_header": auth_header,
        "session_id": session_id,
        "now": now or datetime.now(timezone.utc),
    }

    result = await assistant_agent.ainvoke(
        initial,
        config={"configurable": {"services": services or get_default_services()}},
    )

    return {"response": result["response"], "state": result["next_state"]}
