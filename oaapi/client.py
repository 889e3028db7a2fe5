"""Async HTTP client for the OpenAI audio and chat endpoints.

WHY: Every endpoint needs the same plumbing: an authenticated connection,
a base URL, error-response decoding, and connection cleanup. This module
keeps that plumbing in one class so the endpoint modules (audio.api,
chat.api) only build bodies and interpret results.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Client is an async
context manager: enter it to open an authenticated connection pool, exit
to close it. ``post_json``, ``post_multipart`` and ``stream_post`` are the
only places a request leaves the library; the public facade methods
delegate to the endpoint modules.

RULES:
- Always use the async context manager (async with Client() as client:)
- Authorization is ``Bearer <api key>``; OpenAI-Organization is sent only
  when an organization id is configured
- httpx transport failures are wrapped in HttpRequestError
- Non-2xx responses become ApiError (or ErrorResponseDeserializationError
  when the error body is unreadable)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

import httpx

from oaapi.audio import api as audio_api
from oaapi.audio.formatters.json_formats import JsonResponse, VerboseJsonResponse
from oaapi.audio.formatters.subtitles import SubRip, WebVtt
from oaapi.audio.models import (
    SpeechRequestBody,
    TranscriptionsRequestBody,
    TranslationsRequestBody,
)
from oaapi.audio.speech_stream import SpeechStream
from oaapi.chat import api as chat_api
from oaapi.chat.chunk_stream import ChunkStream
from oaapi.chat.models import CompletionsRequestBody
from oaapi.chat.objects import ChatCompletionObject
from oaapi.config import (
    OPENAI_BASE_URL,
    OPENAI_CONNECT_TIMEOUT_S,
    OPENAI_TIMEOUT_S,
    load_api_key,
    load_organization_id,
)
from oaapi.errors import HttpRequestError
from oaapi.response import raise_for_api_error

logger = logging.getLogger(__name__)


class Client:
    """Async client for the OpenAI audio and chat APIs.

    WHY: Provides one typed entry point for every supported endpoint and
    owns the HTTP connection pool they share.

    HOW: Wraps httpx.AsyncClient with bearer-token auth. The facade
    methods mirror the endpoint functions in oaapi.audio.api and
    oaapi.chat.api.

    RULES:
    - Use as: async with Client() as client: ...
    - api_key defaults to load_api_key() (OPENAI_API_KEY)
    - organization_id defaults to load_organization_id() (OPENAI_ORG_ID)
    - base_url defaults to OPENAI_BASE_URL from config
    - transport is for injecting an httpx transport (tests, proxies)
    """

    def __init__(
        self,
        api_key: str | None = None,
        organization_id: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._organization_id = organization_id or load_organization_id()
        self._base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else OPENAI_TIMEOUT_S
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Client:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers(),
            timeout=httpx.Timeout(self._timeout, connect=OPENAI_CONNECT_TIMEOUT_S),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        if self._organization_id:
            headers["OpenAI-Organization"] = self._organization_id
        return headers

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "Client must be used as an async context manager: "
                "async with Client() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Request seams
    # ------------------------------------------------------------------

    async def post_json(self, endpoint: str, body: dict[str, Any]) -> httpx.Response:
        """POST a JSON body and return the fully read response."""
        client = self._ensure_client()
        logger.debug("POST %s (json)", endpoint)
        try:
            return await client.post(endpoint, json=body)
        except httpx.HTTPError as error:
            raise HttpRequestError(error) from error

    async def post_multipart(
        self,
        endpoint: str,
        data: list[tuple[str, str]],
        files: dict[str, tuple[str, bytes]],
    ) -> httpx.Response:
        """POST multipart form data (text fields plus file parts)."""
        client = self._ensure_client()
        logger.debug("POST %s (multipart, %d fields)", endpoint, len(data))
        try:
            return await client.post(endpoint, data=_form_fields(data), files=files)
        except httpx.HTTPError as error:
            raise HttpRequestError(error) from error

    @asynccontextmanager
    async def stream_post(
        self, endpoint: str, body: dict[str, Any]
    ) -> AsyncIterator[httpx.Response]:
        """POST a JSON body and yield the response with its body unread.

        Non-2xx responses are read and raised as ApiError before yielding.
        The response is closed when the context exits.
        """
        client = self._ensure_client()
        logger.debug("POST %s (stream)", endpoint)
        request = client.build_request("POST", endpoint, json=body)
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as error:
            raise HttpRequestError(error) from error

        try:
            if not response.is_success:
                try:
                    await response.aread()
                except httpx.HTTPError as error:
                    raise HttpRequestError(error) from error
                raise_for_api_error(response)
            yield response
        finally:
            await response.aclose()

    # ------------------------------------------------------------------
    # Audio
    # ------------------------------------------------------------------

    def audio_speech(
        self, request_body: SpeechRequestBody
    ) -> AbstractAsyncContextManager[SpeechStream]:
        """Open a text-to-speech stream: ``async with client.audio_speech(b) as s``."""
        return audio_api.speech(self, request_body)

    async def audio_transcribe_into_json(
        self, request_body: TranscriptionsRequestBody
    ) -> JsonResponse:
        return await audio_api.transcribe_into_json(self, request_body)

    async def audio_transcribe_into_plain_text(
        self, request_body: TranscriptionsRequestBody
    ) -> str:
        return await audio_api.transcribe_into_plain_text(self, request_body)

    async def audio_transcribe_into_verbose_json(
        self, request_body: TranscriptionsRequestBody
    ) -> VerboseJsonResponse:
        return await audio_api.transcribe_into_verbose_json(self, request_body)

    async def audio_transcribe_into_srt(
        self, request_body: TranscriptionsRequestBody
    ) -> SubRip:
        return await audio_api.transcribe_into_srt(self, request_body)

    async def audio_transcribe_into_vtt(
        self, request_body: TranscriptionsRequestBody
    ) -> WebVtt:
        return await audio_api.transcribe_into_vtt(self, request_body)

    async def audio_translate_into_json(
        self, request_body: TranslationsRequestBody
    ) -> JsonResponse:
        return await audio_api.translate_into_json(self, request_body)

    async def audio_translate_into_plain_text(
        self, request_body: TranslationsRequestBody
    ) -> str:
        return await audio_api.translate_into_plain_text(self, request_body)

    async def audio_translate_into_verbose_json(
        self, request_body: TranslationsRequestBody
    ) -> VerboseJsonResponse:
        return await audio_api.translate_into_verbose_json(self, request_body)

    async def audio_translate_into_srt(
        self, request_body: TranslationsRequestBody
    ) -> SubRip:
        return await audio_api.translate_into_srt(self, request_body)

    async def audio_translate_into_vtt(
        self, request_body: TranslationsRequestBody
    ) -> WebVtt:
        return await audio_api.translate_into_vtt(self, request_body)

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    async def chat_complete(
        self, request_body: CompletionsRequestBody
    ) -> ChatCompletionObject:
        return await chat_api.complete(self, request_body)

    def chat_complete_stream(
        self, request_body: CompletionsRequestBody
    ) -> AbstractAsyncContextManager[ChunkStream]:
        """Open a chunk stream: ``async with client.chat_complete_stream(b) as s``."""
        return chat_api.complete_stream(self, request_body)


def _form_fields(data: list[tuple[str, str]]) -> dict[str, str | list[str]]:
    """Group repeated form keys into lists, the shape httpx expects."""
    fields: dict[str, str | list[str]] = {}
    for key, value in data:
        if key in fields:
            existing = fields[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                fields[key] = [existing, value]
        else:
            fields[key] = value
    return fields
