"""OpenAI chat-completions client.

This module provides an async client for the OpenAI chat completions API,
used to produce the sales associate's reply in a conversation turn.
"""

import logging
from typing import Any

import httpx

from app.config import Settings, get_settings
from app.core.upstream import (
    ProviderNotConfiguredError,
    UpstreamError,
    request_with_retry,
)

logger = logging.getLogger(__name__)


class LLMError(UpstreamError):
    """Base exception for LLM-related errors."""
    pass


class LLMConnectionError(LLMError):
    """Raised when connection to LLM API fails."""
    pass


class LLMRateLimitError(LLMError):
    """Raised when rate limit is exceeded."""
    pass


class LLMResponseError(LLMError):
    """Raised when LLM returns an invalid or unexpected response."""
    pass


class OpenAIClient:
    """Async client for the OpenAI chat completions API.

    Usage:
        client = OpenAIClient()
        reply = await client.chat_completion(
            messages=[{"role": "user", "content": "Hello"}]
        )
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client with settings from config."""
        self._settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        """Get the configured model name."""
        return self._settings.openai_model

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            if not self._settings.openai_api_key:
                raise ProviderNotConfiguredError("OPENAI_API_KEY is not configured")

            self._client = httpx.AsyncClient(
                base_url=self._settings.openai_base_url,
                timeout=self._settings.provider_timeout_seconds,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self._settings.openai_api_key}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def chat_completion(
        self,
        messages: list[dict[str, Any]],
    ) -> str:
        """Send a chat completion request and return the reply text.

        Sampling temperature and output length come from OPENAI_TEMPERATURE
        and OPENAI_MAX_TOKENS only.

        Args:
            messages: List of message objects with role and content.

        Returns:
            The content of the first choice's message.

        Raises:
            LLMConnectionError: If the API could not be reached.
            LLMRateLimitError: If rate limit is exceeded.
            LLMResponseError: If the API returns an unexpected response body.
            LLMError: For other API errors.
        """
        client = await self._get_client()

        request_body: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self._settings.openai_temperature,
            "max_tokens": self._settings.openai_max_tokens,
        }

        logger.debug(
            "Sending chat completion request to OpenAI",
            extra={"model": self.model, "message_count": len(messages)},
        )

        try:
            response = await request_with_retry(
                client,
                "POST",
                "/chat/completions",
                json=request_body,
                max_attempts=self._settings.provider_max_attempts,
            )
        except httpx.TransportError as e:
            logger.error(f"Connection error to OpenAI API: {e}")
            raise LLMConnectionError(f"Failed to connect to OpenAI API: {e}") from e

        if response.status_code == 429:
            raise LLMRateLimitError("OpenAI API rate limit exceeded")

        if response.status_code != 200:
            logger.error(f"OpenAI API error: {response.status_code} - {response.text}")
            raise LLMError(f"OpenAI API error: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMResponseError(f"Unexpected chat completion payload: {e}") from e

        if not isinstance(content, str):
            raise LLMResponseError("Chat completion returned no text content")

        logger.debug(
            "Chat completion successful",
            extra={"total_tokens": data.get("usage", {}).get("total_tokens", 0)},
        )
        return content

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()


# Singleton instance for application-wide use
_client_instance: OpenAIClient | None = None


def get_llm_client() -> OpenAIClient:
    """Get or create the global LLM client instance."""
    global _client_instance
    if _client_instance is None:
        _client_instance = OpenAIClient()
    return _client_instance


async def shutdown_llm_client() -> None:
    """Shutdown the global LLM client instance.

    Call this during application shutdown to properly release resources.
    """
    global _client_instance
    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None
