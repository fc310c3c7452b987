"""HTTP client for the Gemini generateContent API."""
import logging
from typing import Any, Dict, Optional

import requests

from ..common.errors import LLMRequestError
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash-lite"


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def extract_text(data: Dict[str, Any]) -> Optional[str]:
    """Concatenate the text parts of the first candidate, or None if there are none."""
    candidates = data.get("candidates") or []
    if not candidates:
        return None
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    texts = [part.get("text") for part in parts if isinstance(part, dict) and part.get("text")]
    if not texts:
        return None
    return "".join(texts).strip() or None


class GeminiClient:
    """Minimal Gemini client: one prompt in, response text out."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = 60, temperature: float = 0.2,
                 retry_policy: Optional[RetryPolicy] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.temperature = temperature
        self.retry_policy = retry_policy or RetryPolicy()
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def _post(self, prompt: str) -> Optional[str]:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature},
        }
        try:
            r = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise LLMRequestError(f"Gemini request failed: {e}", retryable=True) from e
        except requests.RequestException as e:
            raise LLMRequestError(f"Gemini request failed: {e}") from e

        if r.status_code >= 400:
            raise LLMRequestError(
                f"Gemini returned HTTP {r.status_code}: {r.text[:200]}",
                status_code=r.status_code,
                retryable=is_retryable_status(r.status_code),
            )

        try:
            data = r.json()
        except ValueError as e:
            raise LLMRequestError(f"Gemini returned a non-JSON response: {e}") from e
        return extract_text(data)

    def generate_text(self, prompt: str) -> Optional[str]:
        """
        Send a prompt and return the response text.
        Transient failures are retried according to the retry policy.
        """
        logger.debug(f"Calling {self.model} with a {len(prompt)} character prompt")
        return self.retry_policy.call(self._post, prompt)
