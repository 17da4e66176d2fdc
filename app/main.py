"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import get_settings
from app.api import catalog, conversation, health, speech
from app.api.deps import limiter
from app.core.llm import get_llm_client, shutdown_llm_client
from app.services.airtable import get_airtable_client, shutdown_airtable_client
from app.services.deepgram import get_deepgram_client, shutdown_deepgram_client
from app.services.elevenlabs import get_elevenlabs_client, shutdown_elevenlabs_client

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

BANNER = "🌱 Garden Voice Assistant API is running."


def _provider_status() -> list[tuple[str, bool]]:
    """(provider, has credentials) pairs reported at startup."""
    return [
        ("Deepgram", bool(settings.deepgram_api_key)),
        ("Airtable", bool(settings.airtable_api_key and settings.airtable_base_id)),
        ("OpenAI", bool(settings.openai_api_key)),
        ("ElevenLabs", bool(settings.elevenlabs_api_key and settings.elevenlabs_voice_id)),
    ]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup: create the process-wide provider clients once
    get_deepgram_client()
    get_airtable_client()
    get_llm_client()
    get_elevenlabs_client()

    for name, configured in _provider_status():
        if configured:
            logger.info(f"✓ {name} configured")
        else:
            logger.warning(f"⚠️  {name} credentials missing; its endpoint will return 500")

    logger.info(f"Server running on port {settings.port}")

    yield
    # Shutdown: Close connections
    await shutdown_deepgram_client()
    await shutdown_airtable_client()
    await shutdown_llm_client()
    await shutdown_elevenlabs_client()


app = FastAPI(
    title="Garden Voice Assistant API",
    description="Voice relay for the storefront soil assistant: speech-to-text, catalog search, replies and text-to-speech",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware - the widget is embedded on arbitrary storefront origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(speech.router)
app.include_router(catalog.router)
app.include_router(conversation.router)

# =============================================================================
# Exception handlers
# =============================================================================

# Route path -> fixed failure message shown to the widget
FAILURE_MESSAGES = {
    "/api/transcribe": speech.TRANSCRIPTION_FAILED,
    "/api/search-products": catalog.SEARCH_FAILED,
    "/api/get-response": conversation.AI_RESPONSE_FAILED,
    "/api/speak": speech.TTS_FAILED,
}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report unparseable request bodies with the route's fixed 500 body."""
    message = FAILURE_MESSAGES.get(request.url.path)
    if message is None:
        return await request_validation_exception_handler(request, exc)

    logger.error(f"Invalid request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=500, content={"error": message})


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Liveness banner."""
    return BANNER


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.app_debug)
