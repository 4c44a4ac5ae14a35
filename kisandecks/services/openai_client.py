"""
OpenAI-compatible chat completions client
Used by the advisory chat and the image diagnosis endpoint
"""

import logging
from typing import Optional

import httpx

from ..config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS
from ..errors import UpstreamError

logger = logging.getLogger(__name__)

ADVISORY_UNAVAILABLE = ("AI advisory is unavailable. Please try again.", "AI सलाह अभी उपलब्ध नहीं है। फिर से प्रयास करें।")


class OpenAIChatClient:
    def __init__(
        self,
        api_key: Optional[str] = OPENAI_API_KEY,
        base_url: str = OPENAI_BASE_URL,
        model: str = OPENAI_MODEL,
        timeout: float = OPENAI_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, messages: list[dict], max_tokens: int) -> Optional[str]:
        """
        Run a chat completion and return the first choice's text

        Raises:
            UpstreamError: If the provider is not configured, unreachable or returns an error
        """
        if not self.configured:
            logger.error("❌ OPENAI_API_KEY not set, advisory request cannot be served")
            raise UpstreamError(*ADVISORY_UNAVAILABLE)

        payload = {"model": self.model, "messages": messages, "max_tokens": max_tokens}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Chat completion request failed: {str(e)}")
            raise UpstreamError(*ADVISORY_UNAVAILABLE) from e

        if response.status_code >= 400:
            logger.error(f"❌ Chat completion error {response.status_code}: {response.text[:200]}")
            raise UpstreamError(*ADVISORY_UNAVAILABLE)

        try:
            choices = response.json().get("choices") or []
        except ValueError as e:
            logger.error("❌ Chat completion returned invalid JSON")
            raise UpstreamError(*ADVISORY_UNAVAILABLE) from e

        logger.info(f"🤖 Chat completion received ({self.model}, {len(messages)} messages)")
        if not choices:
            return None
        return (choices[0].get("message") or {}).get("content")


def get_openai_client() -> OpenAIChatClient:
    """Dependency injection for OpenAIChatClient"""
    return OpenAIChatClient()
