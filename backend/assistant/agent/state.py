from typing import Any, Dict, Literal, Optional, Tuple, TypedDict, Union
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..schemas import EmailMeta, MeetingDetails, PartialDetails
from ..utils.logger import logger


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["idle"] = "idle"

    def to_wire(self) -> Dict[str, Any]:
        return {}


class MeetingGathering(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["meeting_gathering"] = "meeting_gathering"
    loop_count: int = Field(default=0, ge=0)
    partial: PartialDetails = Field(default_factory=PartialDetails)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "loopCount": self.loop_count,
            "meetingContext": True,
            "partialDetails": self.partial.model_dump(),
        }


class MeetingReadyToConfirm(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["meeting_ready"] = "meeting_ready"
    loop_count: int = Field(default=0, ge=0)
    details: MeetingDetails

    @property
    def partial(self) -> PartialDetails:
        return PartialDetails(title=self.details.title, time=self.details.time)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "loopCount": self.loop_count,
            "meetingContext": True,
            "partialDetails": self.partial.model_dump(),
            "readyToConfirm": True,
            "meetingDetails": self.details.model_dump(),
        }


class EmailAwaitingConfirmation(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["email_awaiting_confirmation"] = "email_awaiting_confirmation"
    emails: Tuple[EmailMeta, ...]
    next_index: int = Field(default=0, ge=0)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "emailDraftFlow": {
                "emails": [email.to_wire() for email in self.emails],
                "nextIndex": self.next_index,
                "awaitingConfirmation": True,
                "autoDrafting": False,
            }
        }


class EmailAutoDrafting(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["email_auto_drafting"] = "email_auto_drafting"
    emails: Tuple[EmailMeta, ...]
    next_index: int = Field(default=0, ge=0)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "emailDraftFlow": {
                "emails": [email.to_wire() for email in self.emails],
                "nextIndex": self.next_index,
                "awaitingConfirmation": False,
                "autoDrafting": True,
            }
        }


ConversationState = Union[
    Idle,
    MeetingGathering,
    MeetingReadyToConfirm,
    EmailAwaitingConfirmation,
    EmailAutoDrafting,
]

MeetingState = (MeetingGathering, MeetingReadyToConfirm)
DraftFlowState = (EmailAwaitingConfirmation, EmailAutoDrafting)


class TurnState(TypedDict):
    """Graph state for a single turn. ``conversation`` is the parsed inbound
    state, ``next_state`` the wire dict handed back to the caller."""
    message: str
    conversation: ConversationState
    intent: Optional[str]
    response: str
    next_state: Dict[str, Any]
    auth_header: Optional[str]
    session_id: Optional[str]
    now: datetime


def parse_conversation_state(raw: Any) -> ConversationState:
    """
    Map a wire dict (as echoed back by the caller) to exactly one state variant.

    Malformed input degrades to Idle. A dict carrying both a draft flow and
    meeting fields resolves to the draft flow.
    """
    if not isinstance(raw, dict) or not raw:
        return Idle()

    try:
        flow = raw.get("emailDraftFlow")
        if isinstance(flow, dict):
            emails = tuple(
                EmailMeta.from_provider(item)
                for item in flow.get("emails") or []
                if isinstance(item, dict)
            )
            if emails:
                next_index = min(_as_count(flow.get("nextIndex")), len(emails))
                if flow.get("autoDrafting"):
                    return EmailAutoDrafting(emails=emails, next_index=next_index)
                return EmailAwaitingConfirmation(emails=emails, next_index=next_index)
            logger.warning("Ignoring email draft flow without emails")

        if not raw.get("meetingContext") and not raw.get("readyToConfirm"):
            return Idle()

        loop_count = _as_count(raw.get("loopCount"))

        details = raw.get("meetingDetails")
        if raw.get("readyToConfirm") and isinstance(details, dict):
            try:
                return MeetingReadyToConfirm(loop_count=loop_count, details=MeetingDetails(**details))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Discarding invalid meeting details: {e}")

        partial = raw.get("partialDetails")
        partial = PartialDetails(**partial) if isinstance(partial, dict) else PartialDetails()
        return MeetingGathering(loop_count=loop_count, partial=partial)

    except (ValidationError, TypeError, ValueError) as e:
        logger.warning(f"⚠️ Malformed conversation state, starting fresh: {e}")
        return Idle()


def _as_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0
