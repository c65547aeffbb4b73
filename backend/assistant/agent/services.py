from typing import Optional

from ..tools.calendar import CalendarIntegrationClient
from ..tools.completion import CompletionClient
from ..tools.confirmation import ConfirmationHandler
from ..tools.drafting import DraftBatcher
from ..tools.email import EmailIntegrationClient
from ..tools.extractor import DetailExtractor
from ..tools.time_parser import TimeNormalizer
from ..utils.config import settings


class AssistantServices:
    """
    Collaborators and helpers handed to the graph nodes through
    ``config["configurable"]["services"]``. Holds no per-conversation data.
    """

    def __init__(
        self,
        calendar: Optional[CalendarIntegrationClient] = None,
        email: Optional[EmailIntegrationClient] = None,
        completion: Optional[CompletionClient] = None,
        normalizer: Optional[TimeNormalizer] = None,
        extractor: Optional[DetailExtractor] = None,
    ):
        self.calendar = calendar or CalendarIntegrationClient()
        self.email = email or EmailIntegrationClient()
        self.completion = completion or CompletionClient()
        self.normalizer = normalizer or TimeNormalizer(default_timezone=settings.default_timezone)
        self.extractor = extractor or DetailExtractor()
        self.confirmation = ConfirmationHandler(self.calendar, self.normalizer)
        self.drafter = DraftBatcher(self.completion)


_default_services: Optional[AssistantServices] = None


def get_default_services() -> AssistantServices:
    global _default_services
    if _default_services is None:
        _default_services = AssistantServices()
    return _default_services
