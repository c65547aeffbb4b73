"""Pydantic models shared by the dialogue engine, the collaborators and the API."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmailMeta(BaseModel):
    """Read-only projection of a provider email, fixed for the whole draft flow."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    provider: str = "google"
    sender: str = Field(default="", alias="from")
    subject: str = ""
    body_preview: str = ""
    received_at: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_provider(cls, raw: Dict[str, Any], provider: str = "google") -> "EmailMeta":
        """Accept both the projected shape and the integration's raw shape
        ({id, from, subject, body, date})."""
        return cls(
            id=str(raw.get("id", "")),
            provider=raw.get("provider") or provider,
            sender=raw.get("from") or raw.get("sender") or "",
            subject=raw.get("subject") or "",
            body_preview=raw.get("body_preview") or raw.get("body") or raw.get("snippet") or "",
            received_at=raw.get("received_at") or raw.get("date"),
        )


class PartialDetails(BaseModel):
    title: Optional[str] = None
    time: Optional[str] = None


class MeetingDetails(BaseModel):
    title: str = Field(min_length=2, max_length=100)
    time: str = Field(min_length=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("title must be at least 2 characters")
        return value


class ChatRequest(BaseModel):
    message: str
    conversation_state: Dict[str, Any] = Field(default_factory=dict)
    session_id: Optional[str] = None
    authHeader: Optional[str] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("message must be a non-empty string")
        return value

    @field_validator("conversation_state", mode="before")
    @classmethod
    def default_state(cls, value: Any) -> Any:
        return {} if value is None else value


class ChatResponse(BaseModel):
    response: str
    state: Dict[str, Any] = Field(default_factory=dict)


EXAMPLE_REQUEST = {
    "message": "Schedule a meeting with the sales team tomorrow at 2pm",
    "conversation_state": {},
    "session_id": None,
}
