"""Shared plumbing for outbound provider calls.

Every third-party client (Deepgram, Airtable, OpenAI, ElevenLabs) raises a
subclass of UpstreamError so handlers can treat provider failures uniformly,
and sends its requests through request_with_retry so the retry policy is
configured in one place.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Base exception for any failed or malformed provider response."""
    pass


class ProviderNotConfiguredError(UpstreamError):
    """Raised when a provider's credentials are missing at first use."""
    pass


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    max_attempts: int = 1,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, retrying only on transport-level failures.

    Non-2xx responses are returned as-is; callers decide what to do with them.
    With max_attempts=1 (the default) the request is sent exactly once.

    Raises:
        httpx.TransportError: If every attempt failed to reach the provider.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return await retrying(client.request, method, url, **kwargs)
