"""Audio endpoints: speech, transcriptions, translations.

WHY: Speech streams binary audio back; transcription and translation
upload audio and answer in a caller-chosen text format. These functions
build the request from a validated body and turn the answer into the
right Python type.

HOW: ``speech`` opens a streamed POST and wraps the body in a
SpeechStream. ``transcribe`` and ``translate`` post a multipart form,
check the status, and run the FORMATTERS entry for the requested
``response_format`` over the body text. The ``*_into_*`` functions fix
the format and the return type.

RULES:
- timestamp_granularities require response_format="verbose_json";
  otherwise ValueError before any request is sent
- Unknown response formats raise ValueError before any request is sent
- Non-2xx answers raise ApiError
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from oaapi.audio.formatters import FORMATTERS
from oaapi.audio.formatters.json_formats import JsonResponse, VerboseJsonResponse
from oaapi.audio.formatters.subtitles import SubRip, WebVtt
from oaapi.audio.models import (
    SpeechRequestBody,
    TranscriptionsRequestBody,
    TranslationsRequestBody,
)
from oaapi.audio.speech_stream import SpeechStream
from oaapi.response import raise_for_api_error

if TYPE_CHECKING:
    from oaapi.client import Client

SPEECH_ENDPOINT = "/audio/speech"
TRANSCRIPTIONS_ENDPOINT = "/audio/transcriptions"
TRANSLATIONS_ENDPOINT = "/audio/translations"


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


@asynccontextmanager
async def speech(
    client: Client,
    request_body: SpeechRequestBody,
) -> AsyncIterator[SpeechStream]:
    """Generate speech audio and stream it back.

    Usage::

        async with speech(client, body) as stream:
            async for chunk in stream:
                out.write(chunk)

    Raises:
        ApiError: the API answered with a non-2xx status.
    """
    async with client.stream_post(
        SPEECH_ENDPOINT, request_body.to_request_json()
    ) as response:
        yield SpeechStream(response.aiter_bytes())


# ---------------------------------------------------------------------------
# Transcriptions and translations
# ---------------------------------------------------------------------------


async def _upload(
    client: Client,
    endpoint: str,
    request_body: TranscriptionsRequestBody | TranslationsRequestBody,
    response_format: str,
) -> Any:
    formatter_cls = FORMATTERS.get(response_format)
    if formatter_cls is None:
        raise ValueError(
            "Unknown response format {!r}; expected one of: {}".format(
                response_format, ", ".join(FORMATTERS)
            )
        )

    response = await client.post_multipart(
        endpoint,
        request_body.form_fields(response_format),
        request_body.form_files(),
    )
    raise_for_api_error(response)
    return formatter_cls().format(response.text)


async def transcribe(
    client: Client,
    request_body: TranscriptionsRequestBody,
    response_format: str,
) -> Any:
    """Transcribe audio into the given response format.

    Returns whatever the registered formatter produces: JsonResponse,
    str, VerboseJsonResponse, SubRip or WebVtt.

    Raises:
        ValueError: timestamp granularities without verbose_json, or an
            unknown response format.
        ApiError: the API answered with a non-2xx status.
        TextFormatError: the body does not match the format.
    """
    if request_body.timestamp_granularities and response_format != "verbose_json":
        raise ValueError(
            "timestamp_granularities require response_format='verbose_json', "
            "got {!r}".format(response_format)
        )
    return await _upload(client, TRANSCRIPTIONS_ENDPOINT, request_body, response_format)


async def translate(
    client: Client,
    request_body: TranslationsRequestBody,
    response_format: str,
) -> Any:
    """Translate audio into English text in the given response format."""
    return await _upload(client, TRANSLATIONS_ENDPOINT, request_body, response_format)


async def transcribe_into_json(client: Client, request_body: TranscriptionsRequestBody) -> JsonResponse:
    return await transcribe(client, request_body, "json")


async def transcribe_into_plain_text(client: Client, request_body: TranscriptionsRequestBody) -> str:
    return await transcribe(client, request_body, "text")


async def transcribe_into_verbose_json(
    client: Client, request_body: TranscriptionsRequestBody
) -> VerboseJsonResponse:
    return await transcribe(client, request_body, "verbose_json")


async def transcribe_into_srt(client: Client, request_body: TranscriptionsRequestBody) -> SubRip:
    return await transcribe(client, request_body, "srt")


async def transcribe_into_vtt(client: Client, request_body: TranscriptionsRequestBody) -> WebVtt:
    return await transcribe(client, request_body, "vtt")


async def translate_into_json(client: Client, request_body: TranslationsRequestBody) -> JsonResponse:
    return await translate(client, request_body, "json")


async def translate_into_plain_text(client: Client, request_body: TranslationsRequestBody) -> str:
    return await translate(client, request_body, "text")


async def translate_into_verbose_json(
    client: Client, request_body: TranslationsRequestBody
) -> VerboseJsonResponse:
    return await translate(client, request_body, "verbose_json")


async def translate_into_srt(client: Client, request_body: TranslationsRequestBody) -> SubRip:
    return await translate(client, request_body, "srt")


async def translate_into_vtt(client: Client, request_body: TranslationsRequestBody) -> WebVtt:
    return await translate(client, request_body, "vtt")
