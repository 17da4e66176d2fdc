"""
Shared test helpers for provider mocks
"""
import asyncio
import json

import httpx


def run(coro):
    """Run a coroutine to completion from a sync test."""
    return asyncio.run(coro)


def connect_error(request: httpx.Request) -> httpx.Response:
    """MockTransport handler simulating an unreachable provider."""
    raise httpx.ConnectError("connection refused", request=request)


def status(code: int, text: str = "upstream failure"):
    """MockTransport handler that always answers with the given status."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(code, text=text)

    return _handler


def deepgram_reply(transcript: str):
    """Handler returning a Deepgram pre-recorded transcription payload."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "metadata": {"request_id": "req-1"},
                "results": {
                    "channels": [
                        {"alternatives": [{"transcript": transcript, "confidence": 0.98}]}
                    ]
                },
            },
        )

    return _handler


def openai_reply(content: str):
    """Handler returning a chat completion with one choice."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-1",
                "choices": [
                    {
                        "index": 0,
                        "message": {"role": "assistant", "content": content},
                        "finish_reason": "stop",
                    }
                ],
                "usage": {"prompt_tokens": 120, "completion_tokens": 40, "total_tokens": 160},
            },
        )

    return _handler


def airtable_page(records: list[dict], offset: str | None = None):
    """Handler returning one page of Airtable records."""

    def _handler(request: httpx.Request) -> httpx.Response:
        body: dict = {"records": records}
        if offset:
            body["offset"] = offset
        return httpx.Response(200, json=body)

    return _handler


def sent_json(request: httpx.Request) -> dict:
    """Decode the JSON body a provider received."""
    return json.loads(request.content)
