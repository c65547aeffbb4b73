from typing import Dict, List, Optional
import httpx
import openai
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..exceptions import CollaboratorError, classify_failure
from ..utils.config import settings
from ..utils.logger import logger


MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


class CompletionClient:
    """Chat-completion collaborator backed by an OpenAI-compatible chat model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model = model or settings.completion_model
        self.timeout = timeout or settings.completion_timeout_seconds

        self.llm = ChatOpenAI(
            model=self.model,
            api_key=api_key if api_key is not None else settings.openai_api_key,
            base_url=base_url or settings.completion_base_url,
            timeout=self.timeout,
            max_retries=settings.completion_max_retries,
            http_async_client=httpx.AsyncClient(transport=transport) if transport else None,
        )
        logger.info(f"Initialized completion client (model={self.model})")

    async def complete(self, messages: List[Dict[str, str]], max_tokens: int, temperature: float) -> str:
        chat = [MESSAGE_TYPES.get(message["role"], HumanMessage)(content=message["content"]) for message in messages]
        logger.debug(f"Completion request: {len(chat)} messages, max_tokens={max_tokens}")

        try:
            response = await self.llm.bind(max_tokens=max_tokens, temperature=temperature).ainvoke(chat)
        except openai.APITimeoutError as e:
            logger.error(f"⏰ Completion request timeout: {e}")
            raise CollaboratorError("timeout", "Completion request timed out")
        except openai.APIStatusError as e:
            kind = classify_failure(e.status_code, e.body, e.message)
            logger.error(f"Completion HTTP {e.status_code} ({kind}): {e.message[:200]}")
            raise CollaboratorError(kind, f"Completion failed: {e.status_code}", status=e.status_code)
        except openai.APIError as e:
            logger.error(f"Completion API error: {e}")
            raise CollaboratorError("generic", f"Completion failed: {str(e)}")
        except (KeyError, IndexError, ValueError) as e:
            # Reply without choices or with an error body on a 2xx status
            logger.error(f"Unexpected completion payload: {e}")
            raise CollaboratorError("generic", "Completion returned no content")

        content = response.content if isinstance(response.content, str) else ""
        if not content.strip():
            logger.error("Completion returned empty content")
            raise CollaboratorError("generic", "Completion returned no content")

        return content.strip()
