"""
pytest common fixtures
"""
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import limiter
from app.config import Settings
from app.main import app


@pytest.fixture
def settings() -> Settings:
    """Settings with every provider configured and no .env influence."""
    return Settings(
        _env_file=None,
        deepgram_api_key="dg-test-key",
        airtable_api_key="at-test-key",
        airtable_base_id="appTESTBASE",
        openai_api_key="sk-test-key",
        elevenlabs_api_key="el-test-key",
        elevenlabs_voice_id="voice-123",
        provider_max_attempts=1,
    )


@pytest.fixture
def client():
    """Test client with a clean rate-limit window and no leftover overrides."""
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_provider(settings):
    """Install a provider client backed by httpx.MockTransport.

    Usage:
        sent = mock_provider(get_deepgram_client, DeepgramClient, handler)

    Returns the list that collects every request the provider received.
    """

    def _install(dependency: Callable, client_cls: type, handler: Callable) -> list[httpx.Request]:
        sent: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return handler(request)

        provider = client_cls(settings=settings, transport=httpx.MockTransport(_record))
        app.dependency_overrides[dependency] = lambda: provider
        return sent

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def sample_record() -> dict:
    """One fully populated Airtable catalog record."""
    return {
        "id": "recSOIL001",
        "createdTime": "2024-03-01T12:00:00.000Z",
        "fields": {
            "product_id": "SOIL-001",
            "title": "EcoMix Potting Soil",
            "brand": "EcoMix",
            "category": "potting-soil",
            "tags": "organic, drainage, containers",
            "short_description": "Light organic mix for pots and planters.",
            "price": 12.99,
            "bag-size-cf": 1.5,
            "in_stock": True,
            "image_url": "https://cdn.example.com/ecomix.jpg",
            "use-case": "Containers and raised beds",
            "voice_script_30S": "EcoMix keeps roots airy and drains fast.",
        },
    }
