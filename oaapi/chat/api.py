"""Chat completions endpoint: one-shot and streamed.

WHY: The same endpoint answers either with one JSON object or with an
event stream, depending on ``stream`` in the body. Two functions make
the choice explicit in the return type.

HOW: ``complete`` posts the body and parses a ChatCompletionObject.
``complete_stream`` opens a streamed POST and hands the response body to
a ChunkStream; it is an async context manager so the HTTP response is
closed when the caller is done.

RULES:
- complete(): body.stream must be unset or False
- complete_stream(): body.stream must be True
- Both raise StreamOptionMismatchError before sending anything otherwise
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from oaapi.chat.chunk_stream import ChunkStream
from oaapi.chat.errors import StreamOptionMismatchError
from oaapi.chat.models import CompletionsRequestBody
from oaapi.chat.objects import ChatCompletionObject
from oaapi.response import parse_json_response

if TYPE_CHECKING:
    from oaapi.client import Client

COMPLETIONS_ENDPOINT = "/chat/completions"


async def complete(
    client: Client,
    request_body: CompletionsRequestBody,
) -> ChatCompletionObject:
    """Create a chat completion and return the whole response.

    Raises:
        StreamOptionMismatchError: body.stream is True.
        ApiError: the API answered with a non-2xx status.
        ResponseDeserializationError: the 2xx body is not a completion.
    """
    if request_body.stream:
        raise StreamOptionMismatchError(
            "complete() requires stream to be unset or False; "
            "use complete_stream() for streamed responses."
        )

    response = await client.post_json(
        COMPLETIONS_ENDPOINT, request_body.to_request_json()
    )
    return parse_json_response(response, ChatCompletionObject.from_dict)


@asynccontextmanager
async def complete_stream(
    client: Client,
    request_body: CompletionsRequestBody,
) -> AsyncIterator[ChunkStream]:
    """Create a streamed chat completion.

    Usage::

        async with complete_stream(client, body) as stream:
            async for chunk in stream:
                print(chunk, end="")

    Raises:
        StreamOptionMismatchError: body.stream is not True.
        ApiError: the API answered with a non-2xx status.
    """
    if request_body.stream is not True:
        raise StreamOptionMismatchError(
            "complete_stream() requires stream=True in the request body."
        )

    async with client.stream_post(
        COMPLETIONS_ENDPOINT, request_body.to_request_json()
    ) as response:
        yield ChunkStream(response.aiter_bytes())
