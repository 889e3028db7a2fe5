"""Byte stream of a text-to-speech response.

WHY: Speech audio can be large and playable before it is complete, so
the body is handed to the caller chunk by chunk instead of buffered.

RULES:
- Yields raw audio bytes in the order received
- Any failure of the upstream raises SpeechStreamError; the stream ends
  after one
"""

from __future__ import annotations

from collections.abc import AsyncIterator


class SpeechStreamError(Exception):
    """The connection failed while reading speech audio."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"Failed to receive speech audio: {error!r}")


class SpeechStream:
    """Async iterator over the audio bytes of a speech response."""

    def __init__(self, byte_stream: AsyncIterator[bytes]) -> None:
        self._byte_stream = byte_stream
        self._finished = False

    def __aiter__(self) -> SpeechStream:
        return self

    async def __anext__(self) -> bytes:
        if self._finished:
            raise StopAsyncIteration
        try:
            return await self._byte_stream.__anext__()
        except StopAsyncIteration:
            self._finished = True
            raise
        except Exception as error:
            self._finished = True
            raise SpeechStreamError(error) from error

    async def read_all(self) -> bytes:
        """Drain the stream into one bytes object."""
        audio = bytearray()
        async for chunk in self:
            audio.extend(chunk)
        return bytes(audio)
