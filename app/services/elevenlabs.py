"""ElevenLabs API client for text-to-speech.

The voice, model and voice settings come from configuration; callers only
choose the text.

Reference: https://elevenlabs.io/docs/api-reference/text-to-speech/convert
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


class ElevenLabsError(UpstreamError):
    """Base exception for ElevenLabs API errors."""
    pass


class ElevenLabsClient:
    """Client for the ElevenLabs text-to-speech API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the ElevenLabs client."""
        self._settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            if not self._settings.elevenlabs_api_key:
                raise ProviderNotConfiguredError("ELEVENLABS_API_KEY not configured")

            self._client = httpx.AsyncClient(
                base_url=self._settings.elevenlabs_base_url,
                timeout=self._settings.provider_timeout_seconds,
                transport=self._transport,
                headers={
                    "xi-api-key": self._settings.elevenlabs_api_key,
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def build_payload(self, text: str) -> dict[str, Any]:
        """Request body for a synthesis call."""
        return {
            "text": text,
            "model_id": self._settings.elevenlabs_model_id,
            "voice_settings": {
                "stability": self._settings.elevenlabs_stability,
                "similarity_boost": self._settings.elevenlabs_similarity_boost,
            },
        }

    async def synthesize(self, text: str) -> bytes:
        """Synthesize speech for the given text.

        The whole MP3 body is buffered before returning.

        Args:
            text: Text to speak

        Returns:
            Audio bytes (audio/mpeg)
        """
        voice_id = self._settings.elevenlabs_voice_id
        if not voice_id:
            raise ProviderNotConfiguredError("ELEVENLABS_VOICE_ID not configured")

        client = await self._get_client()

        logger.debug(f"Synthesizing {len(text)} chars with voice {voice_id}")

        try:
            response = await request_with_retry(
                client,
                "POST",
                f"/text-to-speech/{voice_id}",
                json=self.build_payload(text),
                max_attempts=self._settings.provider_max_attempts,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs API error: {e.response.status_code} - {e.response.text}")
            raise ElevenLabsError(f"Speech synthesis failed: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"ElevenLabs connection error: {e}")
            raise ElevenLabsError(f"Connection error: {e}") from e

        audio = response.content
        logger.info(f"ElevenLabs synthesis complete: {len(audio)} bytes")
        return audio


# Singleton instance
_client_instance: ElevenLabsClient | None = None


def get_elevenlabs_client() -> ElevenLabsClient:
    """Get or create the global ElevenLabs client."""
    global _client_instance
    if _client_instance is None:
        _client_instance = ElevenLabsClient()
    return _client_instance


async def shutdown_elevenlabs_client() -> None:
    """Shutdown the global ElevenLabs client."""
    global _client_instance
    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None
