"""The ``text`` response format: the transcript as-is."""

from __future__ import annotations

from oaapi.audio.formatters.base import TextResponseFormatter


class PlainTextFormatter(TextResponseFormatter):
    @property
    def response_format(self) -> str:
        return "text"

    def format(self, text: str) -> str:
        return text
