"""Deepgram API client for speech-to-text.

Forwards a recorded audio buffer to Deepgram's pre-recorded transcription
endpoint and extracts the top transcript.

Reference: https://developers.deepgram.com/reference/listen-file
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


class DeepgramError(UpstreamError):
    """Base exception for Deepgram API errors."""
    pass


class DeepgramClient:
    """Client for the Deepgram transcription API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Deepgram client."""
        self._settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            if not self._settings.deepgram_api_key:
                raise ProviderNotConfiguredError("DEEPGRAM_API_KEY not configured")

            self._client = httpx.AsyncClient(
                base_url=self._settings.deepgram_base_url,
                timeout=self._settings.provider_timeout_seconds,
                transport=self._transport,
                headers={"Authorization": f"Token {self._settings.deepgram_api_key}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def transcribe(self, audio: bytes) -> str:
        """Transcribe a complete audio recording.

        The buffer is sent as-is with the configured MIME type; its real
        encoding is left for Deepgram to detect.

        Args:
            audio: Raw audio bytes from the widget's recorder

        Returns:
            The transcript of the first alternative on the first channel
        """
        client = await self._get_client()

        params = {
            "model": self._settings.deepgram_model,
            "smart_format": "true",
        }
        headers = {"Content-Type": self._settings.deepgram_audio_mimetype}

        logger.debug(f"Sending {len(audio)} bytes of audio to Deepgram")

        try:
            response = await request_with_retry(
                client,
                "POST",
                "/v1/listen",
                params=params,
                headers=headers,
                content=audio,
                max_attempts=self._settings.provider_max_attempts,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Deepgram API error: {e.response.status_code} - {e.response.text}")
            raise DeepgramError(f"Transcription request failed: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Deepgram connection error: {e}")
            raise DeepgramError(f"Connection error: {e}") from e
        except ValueError as e:
            raise DeepgramError(f"Deepgram returned a non-JSON body: {e}") from e

        transcript = extract_transcript(data)
        logger.info(f"Deepgram transcription complete: {len(transcript)} chars")
        return transcript


def extract_transcript(data: Any) -> str:
    """Pull results.channels[0].alternatives[0].transcript out of a response.

    Raises:
        DeepgramError: If the nested path is missing or not a string.
    """
    try:
        transcript = data["results"]["channels"][0]["alternatives"][0]["transcript"]
    except (KeyError, IndexError, TypeError) as e:
        raise DeepgramError("Deepgram response has no transcript") from e

    if not isinstance(transcript, str):
        raise DeepgramError("Deepgram transcript is not a string")
    return transcript


# Singleton instance
_client_instance: DeepgramClient | None = None


def get_deepgram_client() -> DeepgramClient:
    """Get or create the global Deepgram client."""
    global _client_instance
    if _client_instance is None:
        _client_instance = DeepgramClient()
    return _client_instance


async def shutdown_deepgram_client() -> None:
    """Shutdown the global Deepgram client."""
    global _client_instance
    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None
