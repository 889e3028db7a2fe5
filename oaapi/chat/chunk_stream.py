"""Decoder turning a streamed chat response body into chunk objects.

WHY: With ``stream: true`` the chat endpoint answers with a line protocol:
every event is ``data: <json>`` followed by a blank line, and the stream
ends with ``data: [DONE]``. The body arrives in arbitrary byte chunks, so
events have to be reassembled before they can be parsed.

HOW: ChunkStream is an async iterator. Each ``__anext__`` first tries to
take a complete line from its LineBuffer; if there is none it awaits one
more chunk from the upstream byte source and tries again. A line is then
decoded, filtered (blank lines skipped, sentinel ends the stream),
stripped of its ``data: `` prefix and parsed into a
ChatCompletionChunkObject.

RULES:
- Awaiting the upstream is the only suspension point
- Each pull returns at most one chunk object, in wire order
- ``data: [DONE]`` ends the stream even if more bytes are buffered
- A final line without a trailing newline is still processed
- Any failure of the upstream is raised as StreamTransportError
- Every error is raised once and ends the stream for good
- No logging here; the consumer decides what to do with errors
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, AsyncIterator

from oaapi.chat.errors import (
    ChunkDeserializationError,
    DataPrefixMissingError,
    StreamTransportError,
    StringDecodingError,
)
from oaapi.chat.line_buffer import LineBuffer
from oaapi.chat.objects import ChatCompletionChunkObject

DATA_PREFIX = "data: "
DONE_SENTINEL = DATA_PREFIX + "[DONE]"


class ChunkStream:
    """Async iterator of ChatCompletionChunkObject read from a byte stream.

    WHY: Callers want ``async for chunk in stream`` and nothing else; the
    buffering and framing of the wire protocol stay in here.

    HOW: Holds the upstream iterator, a LineBuffer, and two flags: whether
    the upstream is exhausted and whether this stream has finished.

    RULES:
    - Single consumer; do not pull from two tasks at once
    - Once finished (sentinel, exhaustion, or error) every pull raises
      StopAsyncIteration
    - Closing the upstream (e.g. the HTTP response) is the owner's job
    """

    def __init__(self, byte_stream: AsyncIterable[bytes]) -> None:
        self._upstream: AsyncIterator[bytes] = byte_stream.__aiter__()
        self._buffer = LineBuffer()
        self._upstream_done = False
        self._finished = False

    def __aiter__(self) -> ChunkStream:
        return self

    async def __anext__(self) -> ChatCompletionChunkObject:
        if self._finished:
            raise StopAsyncIteration
        try:
            chunk = await self._next_chunk()
        except Exception:
            self._finished = True
            raise
        if chunk is None:
            self._finished = True
            raise StopAsyncIteration
        return chunk

    async def _next_chunk(self) -> ChatCompletionChunkObject | None:
        """Return the next chunk object, or None when the stream is over."""
        while True:
            line = await self._next_line()
            if line is None:
                return None

            try:
                text = line.decode("utf-8")
            except UnicodeDecodeError as error:
                raise StringDecodingError(error) from error

            # Blank lines separate events
            if not text:
                continue
            if text == DONE_SENTINEL:
                return None
            return _parse_line(text)

    async def _next_line(self) -> bytes | None:
        """Return the next raw line, pulling upstream chunks as needed."""
        while True:
            line = self._buffer.take_line()
            if line is not None:
                return line
            if self._upstream_done:
                return self._buffer.take_remainder()

            try:
                data = await self._upstream.__anext__()
            except StopAsyncIteration:
                self._upstream_done = True
                continue
            except Exception as error:
                raise StreamTransportError(error) from error
            self._buffer.append(data)


def _parse_line(text: str) -> ChatCompletionChunkObject:
    """Strip the ``data: `` prefix and parse the JSON payload."""
    if not text.startswith(DATA_PREFIX):
        raise DataPrefixMissingError(text)
    payload = text[len(DATA_PREFIX):]
    try:
        return ChatCompletionChunkObject.from_dict(json.loads(payload))
    except (ValueError, KeyError, TypeError) as error:
        raise ChunkDeserializationError(error, payload) from error
