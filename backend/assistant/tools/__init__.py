"""Tools for time parsing, detail extraction, and the calendar/email/completion collaborators."""

from .calendar import CalendarIntegrationClient
from .completion import CompletionClient
from .confirmation import ConfirmationHandler, TurnResult
from .drafting import DraftBatcher
from .email import EmailIntegrationClient
from .extractor import DetailExtractor
from .time_parser import TimeNormalizer, add_one_hour, normalize
from .timezone import TimezoneManager

__all__ = [
    "CalendarIntegrationClient",
    "CompletionClient",
    "ConfirmationHandler",
    "TurnResult",
    "DraftBatcher",
    "EmailIntegrationClient",
    "DetailExtractor",
    "TimeNormalizer",
    "add_one_hour",
    "normalize",
    "TimezoneManager"
]
