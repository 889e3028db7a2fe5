"""Chat-specific exceptions.

WHY: A streamed chat response can fail in four distinct ways, and each
needs different context to diagnose. One subclass per failure kind lets
callers ``except`` exactly what they care about instead of matching on
message strings.

RULES:
- Every ChatChunkError ends the chunk stream; nothing follows it
- StreamOptionMismatchError is raised before any request is sent
"""

from __future__ import annotations


class StreamOptionMismatchError(ValueError):
    """Raised when ``stream`` in the request body does not fit the call.

    ``complete`` needs ``stream`` unset or False; ``complete_stream`` needs
    it set to True.
    """


class ChatChunkError(Exception):
    """Base class for failures while decoding a chat chunk stream."""


class StreamTransportError(ChatChunkError):
    """The underlying byte stream raised while reading the next chunk."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"Failed to receive chunk: {error!r}")


class StringDecodingError(ChatChunkError):
    """A line of the stream was not valid UTF-8."""

    def __init__(self, error: UnicodeDecodeError) -> None:
        self.error = error
        super().__init__(f"Failed to decode line as UTF-8: {error}")


class DataPrefixMissingError(ChatChunkError):
    """A non-empty line did not start with ``data: ``."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Line is missing the 'data: ' prefix: {line!r}")


class ChunkDeserializationError(ChatChunkError):
    """The payload after ``data: `` was not a valid chunk object."""

    def __init__(self, error: Exception, text: str) -> None:
        self.error = error
        self.text = text
        super().__init__(f"Failed to deserialize chunk: {error!r}, {text!r}")
