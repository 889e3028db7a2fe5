"""Byte buffer that hands out one newline-terminated line at a time.

WHY: An HTTP body arrives in chunks whose boundaries mean nothing: a chunk
can end mid-line, mid-JSON-token, or even mid-UTF-8 sequence. The event
decoder needs whole lines, so bytes are accumulated here until a newline
shows up.

HOW: A single bytearray. ``append`` extends it, ``take_line`` cuts off the
prefix up to the first ``\\n`` (dropping the newline), ``take_remainder``
drains whatever is left once the upstream has ended.

RULES:
- The delimiter is the single byte 0x0A; ``\\r`` stays part of the line
- Extraction is destructive: a returned line is never returned again
- No decoding happens here; lines are raw bytes
"""

from __future__ import annotations

_NEWLINE = b"\n"


class LineBuffer:
    """Accumulates byte chunks and yields complete lines."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def append(self, chunk: bytes) -> None:
        self._buffer.extend(chunk)

    def take_line(self) -> bytes | None:
        """Remove and return the first complete line, without its newline.

        Returns None (and leaves the buffer untouched) when no newline has
        arrived yet.
        """
        position = self._buffer.find(_NEWLINE)
        if position < 0:
            return None
        line = bytes(self._buffer[:position])
        del self._buffer[: position + 1]
        return line

    def take_remainder(self) -> bytes | None:
        """Drain the buffer as a final unterminated line.

        Only meaningful after the upstream source has ended. Returns None
        when the buffer is empty.
        """
        if not self._buffer:
            return None
        line = bytes(self._buffer)
        self._buffer.clear()
        return line
