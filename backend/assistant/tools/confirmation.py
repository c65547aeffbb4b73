from datetime import datetime
from typing import Any, Dict, NamedTuple, Optional

from .calendar import CalendarIntegrationClient
from .time_parser import TimeNormalizer, add_one_hour
from ..exceptions import CollaboratorError
from ..schemas import MeetingDetails
from ..utils.config import settings
from ..utils.logger import logger
from ..utils.time_utils import format_for_display


class TurnResult(NamedTuple):
    response: str
    state: Dict[str, Any]


PROVIDER_NAMES = {
    "google": "Google Calendar",
    "microsoft": "Outlook Calendar",
    "outlook": "Outlook Calendar",
}


class ConfirmationHandler:
    """
    Books a confirmed meeting through the calendar integration.

    The meeting time is normalized to UTC, the end is fixed at one hour
    after the start, and every outcome (success or any failure kind) is
    rendered as user-facing text. Collaborator errors never escape.
    """

    def __init__(
        self,
        calendar: Optional[CalendarIntegrationClient] = None,
        normalizer: Optional[TimeNormalizer] = None,
        display_timezone: Optional[str] = None,
    ):
        self.calendar = calendar or CalendarIntegrationClient()
        self.normalizer = normalizer or TimeNormalizer(default_timezone=settings.default_timezone)
        self.display_timezone = display_timezone or settings.display_timezone

    def build_event(self, details: MeetingDetails, now: Optional[datetime] = None) -> Dict[str, Any]:
        start = self.normalizer.normalize(details.time, now)
        return {
            "title": details.title,
            "description": settings.meeting_description,
            "start": start,
            "end": add_one_hour(start),
            "location": settings.meeting_location,
            "timeZone": "UTC",
        }

    async def confirm(self, details: MeetingDetails, now: Optional[datetime] = None, auth_header: Optional[str] = None) -> TurnResult:
        logger.info(f"Confirming meeting '{details.title}' ({details.time})")

        event = self.build_event(details, now)
        when = format_for_display(event["start"], self.display_timezone)

        try:
            result = await self.calendar.create_event(event, auth_header)
        except CollaboratorError as e:
            logger.error(f"❌ Meeting booking failed ({e.kind}): {e}")
            return TurnResult(self.failure_message(e.kind, details.title, when), self._state_after_failure(details))

        provider = PROVIDER_NAMES.get(str(result.get("provider") or "").lower())
        calendar_url = result.get("calendarUrl") or (result.get("event") or {}).get("htmlLink")

        message = f"✅ Your meeting \"{details.title}\" is booked for {when}"
        message += f" in {provider}." if provider else "."
        if calendar_url:
            message += f"\n\nView it in your calendar: {calendar_url}"

        logger.info(f"✅ Meeting '{details.title}' booked for {event['start']}")
        return TurnResult(message, {})

    @staticmethod
    def failure_message(kind: str, title: str, when: str) -> str:
        if kind == "auth":
            return (
                f"I couldn't book \"{title}\" because your calendar connection has expired. "
                f"Please log in again or reconnect your calendar account, then try again. "
                f"The meeting was for {when}."
            )
        if kind == "quota":
            return (
                f"The calendar service is busy right now, so \"{title}\" wasn't booked. "
                f"Please try again in a few minutes, or add it manually for {when}."
            )
        if kind == "timeout":
            return (
                f"The calendar took too long to respond, so I'm not sure \"{title}\" was booked. "
                f"Please check your calendar and add it manually for {when} if it's missing."
            )
        if kind == "validation":
            return (
                f"The calendar rejected the details for \"{title}\". "
                f"Please add it manually for {when}, or try again with a different title or time."
            )
        return (
            f"Sorry, something went wrong while booking \"{title}\". "
            f"Please add it to your calendar manually for {when}."
        )

    @staticmethod
    def _state_after_failure(details: MeetingDetails) -> Dict[str, Any]:
        if not settings.retain_failed_meeting:
            return {}
        return {
            "loopCount": 0,
            "meetingContext": True,
            "partialDetails": {"title": details.title, "time": details.time},
            "readyToConfirm": True,
            "meetingDetails": {"title": details.title, "time": details.time},
        }
