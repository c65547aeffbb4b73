from typing import Any, Dict, Optional
import httpx

from ..exceptions import CollaboratorError, classify_failure
from ..utils.config import settings
from ..utils.logger import logger


async def post_json(
    url: str,
    body: Dict[str, Any],
    auth_header: Optional[str],
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    label: str = "collaborator",
) -> Dict[str, Any]:
    """
    POST a JSON body to an integration function and return the decoded reply.

    The bearer token is forwarded as-is. Non-2xx replies, payloads that carry
    ``needsAuth``/``error`` and transport failures all raise CollaboratorError.
    """
    headers = {"Content-Type": "application/json"}
    if auth_header:
        headers["Authorization"] = auth_header

    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport) as http_client:
            response = await http_client.post(url, json=body, headers=headers)
    except httpx.TimeoutException as e:
        logger.error(f"⏰ {label} request timed out after {timeout}s: {e}")
        raise CollaboratorError("timeout", f"{label} request timed out")
    except httpx.HTTPError as e:
        logger.error(f"{label} HTTP error: {e}")
        raise CollaboratorError("generic", f"{label} request failed: {e}")

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if response.status_code >= 400:
        kind = classify_failure(response.status_code, payload, response.text)
        message = payload.get("error") if isinstance(payload, dict) and payload.get("error") else response.text
        logger.error(f"❌ {label} returned {response.status_code} ({kind}): {message}")
        raise CollaboratorError(kind, str(message), status=response.status_code, payload=payload)

    if not isinstance(payload, dict):
        raise CollaboratorError("generic", f"{label} returned a non-JSON reply", status=response.status_code)

    if payload.get("needsAuth") or (payload.get("error") and not payload.get("event") and "emails" not in payload):
        kind = classify_failure(response.status_code, payload)
        logger.error(f"❌ {label} reported failure ({kind}): {payload.get('error')}")
        raise CollaboratorError(kind, str(payload.get("error") or "Authentication required"), status=response.status_code, payload=payload)

    return payload


class CalendarIntegrationClient:
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.calendar_url
        self.timeout = timeout or settings.collaborator_timeout_seconds
        self.transport = transport
        logger.info(f"Initialized calendar integration client ({self.url})")

    async def create_event(self, event: Dict[str, Any], auth_header: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a calendar event through the calendar integration function.

        Args:
            event: {title, description, start, end, location, timeZone}
            auth_header: Bearer token forwarded from the inbound request

        Returns:
            {"event": {...}, "calendarUrl"?: str, "provider"?: str}
        """
        logger.info(f"📅 Creating calendar event '{event.get('title')}' at {event.get('start')}")
        payload = await post_json(
            self.url,
            {"action": "create_event", "event": event},
            auth_header,
            self.timeout,
            transport=self.transport,
            label="Calendar integration",
        )
        created = payload.get("event")
        if created is not None and not isinstance(created, dict):
            logger.error(f"❌ Calendar integration returned a malformed event: {created!r}")
            raise CollaboratorError("generic", "Calendar integration returned a malformed event", payload=payload)

        logger.info(f"✅ Calendar event created: {(created or {}).get('id', 'unknown id')}")
        return payload
