"""API dependencies for dependency injection."""

import logging
from typing import Annotated

from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings
from app.core.llm import OpenAIClient, get_llm_client
from app.services.airtable import AirtableClient, get_airtable_client
from app.services.deepgram import DeepgramClient, get_deepgram_client
from app.services.elevenlabs import ElevenLabsClient, get_elevenlabs_client

logger = logging.getLogger(__name__)
settings = get_settings()

# Rate limiter - uses client IP address
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)
RATE_LIMIT = settings.rate_limit


# =============================================================================
# Type Aliases
# =============================================================================

# Process-lifetime provider clients, overridable in tests via
# app.dependency_overrides[get_<provider>_client].
DeepgramDep = Annotated[DeepgramClient, Depends(get_deepgram_client)]
AirtableDep = Annotated[AirtableClient, Depends(get_airtable_client)]
LLMDep = Annotated[OpenAIClient, Depends(get_llm_client)]
ElevenLabsDep = Annotated[ElevenLabsClient, Depends(get_elevenlabs_client)]
