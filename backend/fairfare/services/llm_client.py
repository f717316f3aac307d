"""
Gemini text generation client.

Thin wrapper over the generateContent REST endpoint: prompt in, text out.
Callers own prompt wording and response parsing.
"""
import logging
from typing import Optional
import httpx
from fairfare.core.config import settings

logger = logging.getLogger(__name__)


class LLMError(ValueError):
    """Raised when the model cannot produce a reply."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GeminiClient:
    """Async client for Gemini text generation."""

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        api_url: str = None,
        timeout: float = None
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.api_url = (api_url or settings.GEMINI_API_URL).rstrip("/")
        self.timeout = timeout or settings.LLM_TIMEOUT

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            LLMError: Missing API key, HTTP failure or an empty reply
        """
        if not self.configured:
            logger.error("GEMINI_API_KEY is not configured. Please set it in .env file.")
            raise LLMError("AI key missing")

        url = f"{self.api_url}/{self.model}:generateContent"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url,
                    headers={
                        "x-goog-api-key": self.api_key,
                        "Content-Type": "application/json"
                    },
                    json={"contents": [{"parts": [{"text": prompt}]}]}
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error {e.response.status_code}: {e.response.text}")
            raise LLMError(f"Gemini API HTTP error: {e.response.status_code}",
                           status_code=e.response.status_code)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error with Gemini API: {e}")
            raise LLMError(f"Gemini API network error: {str(e)}")

        if settings.DEBUG:
            logger.debug(f"Gemini response: {data}")

        candidates = data.get("candidates") or []
        if not candidates:
            raise LLMError("Gemini returned no candidates")
        parts = candidates[0].get("content", {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            raise LLMError("Gemini returned an empty reply")
        return text
