"""Abstract base for audio response formatters, and their errors.

WHY: Transcription and translation answer in one of five text formats
chosen by ``response_format``. The endpoint code should not care which;
it hands the body text to a formatter and returns what comes back.

HOW: TextResponseFormatter is an ABC with a ``response_format`` property
(the wire value) and a ``format()`` method turning body text into a
typed result. TextFormatError and its subclasses report bodies that do
not parse.

RULES:
- Subclasses MUST implement ``response_format`` and ``format()``
- ``format()`` raises a TextFormatError subclass on malformed input
- Errors keep the raw text for diagnosis

To add a new response format:
1. Create a new file in formatters/
2. Subclass TextResponseFormatter
3. Implement format() and response_format
4. Register in FORMATTERS dict in formatters/__init__.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class TextFormatError(Exception):
    """Base class for response bodies that do not match their format."""

    def __init__(self, error: Exception, text: str) -> None:
        self.error = error
        self.text = text
        super().__init__(f"{self._describe()}: {error}, {text!r}")

    def _describe(self) -> str:
        return "Failed to format response text"


class FormatJsonError(TextFormatError):
    def _describe(self) -> str:
        return "Failed to format JSON"


class ParseSrtError(TextFormatError):
    def _describe(self) -> str:
        return "Failed to parse SubRip"


class ParseVttError(TextFormatError):
    def _describe(self) -> str:
        return "Failed to parse WebVTT"


class TextResponseFormatter(ABC):
    """Converts the body text of an audio response into a typed result."""

    @property
    @abstractmethod
    def response_format(self) -> str:
        """Wire value of ``response_format``, e.g. 'verbose_json'."""

    @abstractmethod
    def format(self, text: str) -> Any:
        """Parse the response body.

        Args:
            text: The decoded body of a 2xx response.

        Returns:
            The typed result for this format.
        """
