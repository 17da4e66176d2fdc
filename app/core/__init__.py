"""Core utilities for the LLM client, prompts and provider plumbing.

This module provides the shared AI infrastructure for the voice relay:
- OpenAI chat-completions client for the sales associate's replies
- System prompt for the garden-center persona
- UpstreamError hierarchy and retry helper for every provider call
"""

from app.core.llm import (
    OpenAIClient,
    LLMError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    get_llm_client,
    shutdown_llm_client,
)
from app.core.prompts import (
    SALES_ASSOCIATE_PROMPT,
    build_system_prompt,
    serialize_products,
)
from app.core.upstream import (
    UpstreamError,
    ProviderNotConfiguredError,
    request_with_retry,
)

__all__ = [
    # LLM Client
    "OpenAIClient",
    "LLMError",
    "LLMConnectionError",
    "LLMRateLimitError",
    "LLMResponseError",
    "get_llm_client",
    "shutdown_llm_client",
    # Prompts
    "SALES_ASSOCIATE_PROMPT",
    "build_system_prompt",
    "serialize_products",
    # Provider plumbing
    "UpstreamError",
    "ProviderNotConfiguredError",
    "request_with_retry",
]
