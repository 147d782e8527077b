"""Chat-completions client for OpenAI-compatible providers."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..core.config import Settings
from ..core.exceptions import ApiError, ConfigurationError, QueryGenerationError

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = (
    "LLM API key is not configured. Set ASKSQL_LLM_API_KEY or pass llm_api_key in settings."
)


class CompletionClient:
    """One request/response round trip per ``complete`` call.

    The API key is checked once, here, rather than on every call.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        if not settings.llm_api_key:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)
        self.settings = settings
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=settings.request_timeout)

    @property
    def provider_label(self) -> str:
        return self.settings.provider.label

    def complete(self, prompt: str) -> Optional[str]:
        """Send a single user message and return the first choice's text.

        Returns None when the response carries no message content.

        Raises:
            ApiError: On transport, timeout or HTTP status failures
            QueryGenerationError: On any other failure during the call
        """
        url = self.settings.completions_url
        payload = {
            "model": self.settings.llm_model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.settings.llm_api_key}",
            "Content-Type": "application/json",
        }

        logger.debug(
            f"Calling {self.provider_label} with model={self.settings.llm_model_name}, "
            f"temp={self.settings.temperature}"
        )

        try:
            response = self._http.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.provider_label} HTTP error: {e.response.status_code} - {e.response.text[:200]}")
            raise ApiError(
                f"{self.provider_label} API error: status {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_label} request failed: {e}")
            raise ApiError(f"{self.provider_label} API error: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected completion failure: {e}")
            raise QueryGenerationError(f"Failed to generate SQL query: {e}") from e

        content = _extract_content(data)
        logger.debug(f"Completion length: {len(content) if content else 0} chars")
        return content

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "CompletionClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _extract_content(data: Any) -> Optional[str]:
    """Pull ``choices[0].message.content`` out of a response payload."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Completion response has no message content")
        return None
    if content is None:
        return None
    return str(content).strip()
