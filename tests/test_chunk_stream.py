"""Tests for the ChunkStream event decoder.

WHY: The decoder is the one piece of the client that must work no matter
how the network splits the response body. These tests feed it the same
wire bytes cut in every possible way and check that the decoded chunks
never change, then check each failure mode ends the stream cleanly.

HOW: Byte sources are plain async generators from conftest. Each test
drives the decoder with asyncio.run() and collects what it yields.

RULES:
- No HTTP here; the decoder only sees an async byte iterator
- After any error, the stream must report end-of-stream forever
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator

import httpx
import pytest

from conftest import (
    CONCRETE_STREAM,
    HI_CHUNK,
    ROLE_CHUNK,
    byte_source,
    content_chunk,
    sse_body,
    sse_frame,
)
from oaapi.chat.chunk_stream import ChunkStream
from oaapi.chat.errors import (
    ChatChunkError,
    ChunkDeserializationError,
    DataPrefixMissingError,
    StreamTransportError,
    StringDecodingError,
)
from oaapi.chat.models import Role
from oaapi.chat.objects import ChatCompletionChunkObject


def _drain(
    source: AsyncIterator[bytes],
) -> tuple[list[ChatCompletionChunkObject], ChatChunkError | None]:
    """Pull until the stream ends or raises; return chunks and the error."""

    async def _run():
        stream = ChunkStream(source)
        chunks = []
        try:
            async for chunk in stream:
                chunks.append(chunk)
        except ChatChunkError as error:
            return chunks, error, stream
        return chunks, None, stream

    chunks, error, _ = asyncio.run(_run())
    return chunks, error


def _contents(chunks: list[ChatCompletionChunkObject]) -> list[str]:
    return [str(chunk) for chunk in chunks]


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------


class TestFraming:
    def test_concrete_scenario(self):
        chunks, error = _drain(byte_source([CONCRETE_STREAM]))
        assert error is None
        assert len(chunks) == 2
        first, second = chunks
        assert first.choices[0].delta.role == Role.ASSISTANT
        assert first.choices[0].delta.content == ""
        assert second.choices[0].delta.role is None
        assert second.choices[0].delta.content == "Hi"
        assert first.id == "x"
        assert first.model == "m"

    def test_n_frames_yield_n_chunks(self):
        body = sse_body([content_chunk(str(i)) for i in range(5)])
        chunks, error = _drain(byte_source([body]))
        assert error is None
        assert _contents(chunks) == ["0", "1", "2", "3", "4"]

    def test_every_two_way_split_gives_same_chunks(self):
        whole, _ = _drain(byte_source([CONCRETE_STREAM]))
        for offset in range(len(CONCRETE_STREAM) + 1):
            parts = [CONCRETE_STREAM[:offset], CONCRETE_STREAM[offset:]]
            chunks, error = _drain(byte_source(parts))
            assert error is None, offset
            assert chunks == whole, offset

    def test_byte_by_byte_delivery(self):
        body = sse_body([content_chunk("héllo"), content_chunk(" wörld")])
        pieces = [body[i:i + 1] for i in range(len(body))]
        chunks, error = _drain(byte_source(pieces))
        assert error is None
        assert _contents(chunks) == ["héllo", " wörld"]

    def test_empty_chunks_are_harmless(self):
        chunks, error = _drain(byte_source([b"", CONCRETE_STREAM[:10], b"", CONCRETE_STREAM[10:]]))
        assert error is None
        assert _contents(chunks) == ["", "Hi"]

    def test_blank_lines_are_never_emitted(self):
        body = b"\n\n\n" + sse_frame(HI_CHUNK) + b"\n\n\n" + b"data: [DONE]\n"
        chunks, error = _drain(byte_source([body]))
        assert error is None
        assert _contents(chunks) == ["Hi"]

    def test_trailing_line_without_newline_is_decoded(self):
        body = sse_frame(ROLE_CHUNK) + b"data: " + json.dumps(HI_CHUNK).encode()
        chunks, error = _drain(byte_source([body]))
        assert error is None
        assert _contents(chunks) == ["", "Hi"]

    def test_upstream_end_without_sentinel_ends_cleanly(self):
        chunks, error = _drain(byte_source([sse_body([HI_CHUNK], done=False)]))
        assert error is None
        assert _contents(chunks) == ["Hi"]

    def test_empty_body_yields_nothing(self):
        chunks, error = _drain(byte_source([]))
        assert chunks == []
        assert error is None

    def test_carriage_return_stays_in_payload(self):
        # JSON tolerates the trailing \r, so the record still parses
        body = b"data: " + json.dumps(HI_CHUNK).encode() + b"\r\n"
        chunks, error = _drain(byte_source([body]))
        assert error is None
        assert _contents(chunks) == ["Hi"]


# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class TestDoneSentinel:
    def test_buffered_bytes_after_done_are_ignored(self):
        body = sse_frame(HI_CHUNK) + b"data: [DONE]\n\n" + b"garbage line\n" + sse_frame(HI_CHUNK)
        chunks, error = _drain(byte_source([body]))
        assert error is None
        assert _contents(chunks) == ["Hi"]

    def test_upstream_not_pulled_after_done(self):
        pulled = []

        async def source():
            yield sse_frame(HI_CHUNK) + b"data: [DONE]\n\n"
            pulled.append("extra")
            yield sse_frame(HI_CHUNK)

        chunks, error = _drain(source())
        assert error is None
        assert _contents(chunks) == ["Hi"]
        assert pulled == []

    def test_done_split_across_chunks(self):
        body = sse_frame(HI_CHUNK) + b"data: [DO"
        chunks, error = _drain(byte_source([body, b"NE]\n", sse_frame(HI_CHUNK)]))
        assert error is None
        assert _contents(chunks) == ["Hi"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_missing_prefix_raises_once(self):
        body = sse_frame(HI_CHUNK) + b"event: ping\n" + sse_frame(HI_CHUNK)
        chunks, error = _drain(byte_source([body]))
        assert _contents(chunks) == ["Hi"]
        assert isinstance(error, DataPrefixMissingError)
        assert error.line == "event: ping"

    def test_prefix_without_space_is_missing_prefix(self):
        chunks, error = _drain(byte_source([b'data:{"id":"x"}\n']))
        assert chunks == []
        assert isinstance(error, DataPrefixMissingError)

    def test_malformed_json_raises_deserialization_error(self):
        chunks, error = _drain(byte_source([b"data: {not json}\n\n"]))
        assert chunks == []
        assert isinstance(error, ChunkDeserializationError)
        assert error.text == "{not json}"

    def test_wrong_shape_raises_deserialization_error(self):
        chunks, error = _drain(byte_source([b'data: {"id": "x"}\n\n']))
        assert isinstance(error, ChunkDeserializationError)
        assert isinstance(error.error, KeyError)

    def test_invalid_utf8_raises_decoding_error(self):
        chunks, error = _drain(byte_source([b"data: \xff\xfe\n"]))
        assert chunks == []
        assert isinstance(error, StringDecodingError)

    def test_transport_error_is_wrapped(self):
        async def source():
            yield sse_frame(HI_CHUNK)
            raise httpx.ReadError("connection reset")

        chunks, error = _drain(source())
        assert _contents(chunks) == ["Hi"]
        assert isinstance(error, StreamTransportError)
        assert isinstance(error.error, httpx.ReadError)

    @pytest.mark.parametrize(
        "body",
        [
            b"oops\n" + sse_frame(HI_CHUNK),
            b"data: nope\n" + sse_frame(HI_CHUNK),
            b"data: \xff\n" + sse_frame(HI_CHUNK),
        ],
    )
    def test_stream_stays_finished_after_error(self, body):
        async def _run():
            stream = ChunkStream(byte_source([body]))
            with pytest.raises(ChatChunkError):
                await stream.__anext__()
            for _ in range(3):
                with pytest.raises(StopAsyncIteration):
                    await stream.__anext__()

        asyncio.run(_run())

    def test_stream_stays_finished_after_done(self):
        async def _run():
            stream = ChunkStream(byte_source([CONCRETE_STREAM]))
            assert len([chunk async for chunk in stream]) == 2
            with pytest.raises(StopAsyncIteration):
                await stream.__anext__()

        asyncio.run(_run())

    def test_any_upstream_exception_is_wrapped_and_final(self):
        # The buffered trailing line must not surface after the failure
        async def source():
            yield sse_frame(ROLE_CHUNK) + b"data: " + json.dumps(HI_CHUNK).encode()
            raise RuntimeError("source broke")

        async def _run():
            stream = ChunkStream(source())
            first = await stream.__anext__()
            with pytest.raises(StreamTransportError) as excinfo:
                await stream.__anext__()
            for _ in range(3):
                with pytest.raises(StopAsyncIteration):
                    await stream.__anext__()
            return first, excinfo.value

        first, error = asyncio.run(_run())
        assert str(first) == ""
        assert isinstance(error.error, RuntimeError)

    @pytest.mark.parametrize(
        "payload",
        [
            '{"id":1,"object":"o","created":"yesterday","model":["m"],'
            '"choices":[{"index":"zero","delta":{"content":5}}]}',
            '{"id":"x","object":"o","created":"1","model":"m","choices":[]}',
            '{"id":"x","object":"o","created":1,"model":"m","choices":{}}',
            '{"id":"x","object":"o","created":1,"model":"m",'
            '"choices":[{"index":0,"delta":{"content":5}}]}',
            '{"id":"x","object":"o","created":1,"model":"m",'
            '"choices":[{"index":true,"delta":{}}]}',
            '{"id":"x","object":"o","created":1,"model":"m",'
            '"choices":[{"index":0,"delta":[]}]}',
            '["not", "an", "object"]',
        ],
    )
    def test_wrong_field_types_raise_deserialization_error(self, payload):
        body = ("data: " + payload + "\n\n").encode()
        chunks, error = _drain(byte_source([body, sse_frame(HI_CHUNK)]))
        assert chunks == []
        assert isinstance(error, ChunkDeserializationError)
        assert isinstance(error.error, TypeError)
        assert error.text == payload
