"""Exception hierarchy for the Executive Assistant backend."""

from typing import Any, Optional


class AssistantError(Exception):
    """Base exception for all assistant errors."""
    pass


class CollaboratorError(AssistantError):
    """An external collaborator (calendar, email, completion) call failed.

    ``kind`` is one of ``auth``, ``quota``, ``timeout``, ``validation`` or
    ``generic`` and drives the user-facing message.
    """

    KINDS = ("auth", "quota", "timeout", "validation", "generic")

    def __init__(self, kind: str, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.kind = kind if kind in self.KINDS else "generic"
        self.status = status
        self.payload = payload

    @property
    def needs_auth(self) -> bool:
        return self.kind == "auth"


def classify_failure(status: Optional[int], payload: Any = None, text: str = "") -> str:
    """Map a failed collaborator response to an error kind."""
    body = payload if isinstance(payload, dict) else {}
    declared = str(body.get("type") or "").lower()
    error_text = f"{body.get('error') or ''} {body.get('message') or ''} {text}".lower()

    if status == 401 or body.get("needsAuth") or declared == "auth" \
            or "unauthorized" in error_text or "invalid claim" in error_text:
        return "auth"
    if status == 429 or declared == "quota" or "quota" in error_text or "rate limit" in error_text:
        return "quota"
    if status in (408, 504) or declared == "timeout" or "timeout" in error_text or "timed out" in error_text:
        return "timeout"
    if status in (400, 422) or declared == "validation":
        return "validation"
    return "generic"
