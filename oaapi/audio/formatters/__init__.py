"""Audio response formatter registry.

WHY: Transcription and translation pick their output shape with the
``response_format`` field. A central dict maps each wire value to the
class that parses it, so the endpoint code needs one lookup and adding a
format is one more line here.

HOW: FORMATTERS maps wire values to formatter *classes* (not instances).
Callers instantiate as needed: ``FORMATTERS["srt"]().format(text)``.

RULES:
- Keys are the exact ``response_format`` wire values
- Values are TextResponseFormatter subclasses (not instances)
"""

from __future__ import annotations

from oaapi.audio.formatters.base import (
    FormatJsonError,
    ParseSrtError,
    ParseVttError,
    TextFormatError,
    TextResponseFormatter,
)
from oaapi.audio.formatters.json_formats import (
    JsonFormatter,
    JsonResponse,
    Segment,
    VerboseJsonFormatter,
    VerboseJsonResponse,
    Word,
)
from oaapi.audio.formatters.plain_text import PlainTextFormatter
from oaapi.audio.formatters.subtitles import (
    SrtFormatter,
    SubRip,
    SubRipCue,
    VttFormatter,
    WebVtt,
    WebVttCue,
)

FORMATTERS: dict[str, type[TextResponseFormatter]] = {
    "json": JsonFormatter,
    "text": PlainTextFormatter,
    "verbose_json": VerboseJsonFormatter,
    "srt": SrtFormatter,
    "vtt": VttFormatter,
}

__all__ = [
    "FORMATTERS",
    "FormatJsonError",
    "JsonResponse",
    "ParseSrtError",
    "ParseVttError",
    "Segment",
    "SubRip",
    "SubRipCue",
    "TextFormatError",
    "TextResponseFormatter",
    "VerboseJsonResponse",
    "WebVtt",
    "WebVttCue",
    "Word",
]
