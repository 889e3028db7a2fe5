"""Shared test fixtures for the oaapi test suite.

WHY: The decoder, endpoint and CLI tests all need the same sample event
stream and a Client that never touches the network. Centralizing them
here keeps every test module working from the same wire data.

HOW: Module-level constants hold the sample chunk payloads and the
concrete two-event stream. ``make_client`` builds a Client on an
httpx.MockTransport driven by a handler function, so tests see the
exact request the library sent and choose the response.

RULES:
- No test performs real HTTP
- The API key is always the fake "sk-test"
- OPENAI_ORG_ID is cleared so header assertions are deterministic
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest

from oaapi.client import Client


# ---------------------------------------------------------------------------
# Sample event stream
# ---------------------------------------------------------------------------

ROLE_CHUNK: dict[str, Any] = {
    "id": "x",
    "object": "o",
    "created": 1,
    "model": "m",
    "choices": [
        {"index": 0, "delta": {"role": "assistant", "content": ""}, "finish_reason": None}
    ],
}

HI_CHUNK: dict[str, Any] = {
    "id": "x",
    "object": "o",
    "created": 1,
    "model": "m",
    "choices": [{"index": 0, "delta": {"content": "Hi"}, "finish_reason": None}],
}

CONCRETE_STREAM: bytes = (
    b'data: {"id":"x","object":"o","created":1,"model":"m","choices":'
    b'[{"index":0,"delta":{"role":"assistant","content":""},"finish_reason":null}]}\n\n'
    b'data: {"id":"x","object":"o","created":1,"model":"m","choices":'
    b'[{"index":0,"delta":{"content":"Hi"},"finish_reason":null}]}\n\n'
    b"data: [DONE]\n\n"
)

COMPLETION_RESPONSE: dict[str, Any] = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1677652288,
    "model": "gpt-3.5-turbo-0125",
    "system_fingerprint": "fp_44709d6fcb",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello there!"},
            "logprobs": None,
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
}

API_ERROR_BODY: dict[str, Any] = {
    "error": {
        "message": "Incorrect API key provided",
        "type": "invalid_request_error",
        "param": None,
        "code": "invalid_api_key",
    }
}


def content_chunk(content: str, index: int = 0) -> dict[str, Any]:
    """A chunk payload carrying one content delta."""
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 1,
        "model": "gpt-3.5-turbo-0125",
        "choices": [{"index": index, "delta": {"content": content}, "finish_reason": None}],
    }


def sse_frame(payload: dict[str, Any]) -> bytes:
    """Encode one payload as a ``data: <json>`` event followed by a blank line."""
    return b"data: " + json.dumps(payload).encode("utf-8") + b"\n\n"


def sse_body(payloads: list[dict[str, Any]], done: bool = True) -> bytes:
    body = b"".join(sse_frame(p) for p in payloads)
    if done:
        body += b"data: [DONE]\n\n"
    return body


async def byte_source(chunks: list[bytes]) -> AsyncIterator[bytes]:
    """Async byte stream yielding the given chunks in order."""
    for chunk in chunks:
        yield chunk


# ---------------------------------------------------------------------------
# Client on a mock transport
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_org_id(monkeypatch):
    monkeypatch.delenv("OPENAI_ORG_ID", raising=False)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    organization_id: str | None = None,
) -> Client:
    """Build a Client whose requests are answered by ``handler``."""
    return Client(
        api_key="sk-test",
        organization_id=organization_id,
        base_url="https://api.test/v1",
        transport=httpx.MockTransport(handler),
    )


class RecordingHandler:
    """MockTransport handler that records requests and returns a fixed response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def completion_handler():
    return RecordingHandler(httpx.Response(200, json=COMPLETION_RESPONSE))


@pytest.fixture
def error_handler():
    return RecordingHandler(httpx.Response(401, json=API_ERROR_BODY))
