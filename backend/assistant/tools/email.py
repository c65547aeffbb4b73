from typing import List, Optional
import httpx

from .calendar import post_json
from ..schemas import EmailMeta
from ..utils.config import settings
from ..utils.logger import logger


class EmailIntegrationClient:
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.email_url
        self.timeout = timeout or settings.collaborator_timeout_seconds
        self.transport = transport
        logger.info(f"Initialized email integration client ({self.url})")

    async def get_emails(self, folder: str = "inbox", auth_header: Optional[str] = None, unread_only: bool = True) -> List[EmailMeta]:
        payload = await post_json(
            self.url,
            {"action": "get_emails", "folder": folder},
            auth_header,
            self.timeout,
            transport=self.transport,
            label="Email integration",
        )

        provider = payload.get("provider") or "google"
        emails = []
        for raw in payload.get("emails") or []:
            if not isinstance(raw, dict):
                continue
            if unread_only and raw.get("read") is True:
                continue
            emails.append(EmailMeta.from_provider(raw, provider))

        logger.info(f"📬 Retrieved {len(emails)} email(s) from {folder}")
        return emails
