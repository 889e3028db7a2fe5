"""The ``json`` and ``verbose_json`` response formats.

WHY: ``json`` carries only the text; ``verbose_json`` adds the detected
language, the duration, and per-segment (and optionally per-word)
timing. Both are parsed into frozen dataclasses so callers get
attributes instead of dict lookups.

HOW: Each dataclass has a ``from_dict`` classmethod, the same pattern as
the chat response objects. The formatters json-decode the body and hand
the dict to ``from_dict``; any decoding or shape failure becomes
FormatJsonError.

RULES:
- ``words`` is only present when word granularity was requested
- ``segments`` may be absent when only word granularity was requested
- Unknown keys are ignored
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from oaapi.audio.formatters.base import FormatJsonError, TextResponseFormatter


@dataclass(frozen=True)
class JsonResponse:
    text: str

    @classmethod
    def from_dict(cls, data: dict) -> JsonResponse:
        return cls(text=data["text"])

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Segment:
    """One recognized segment of a verbose transcript."""

    id: int
    seek: int
    start: float
    end: float
    text: str
    tokens: list[int]
    temperature: float
    avg_logprob: float
    compression_ratio: float
    no_speech_prob: float

    @classmethod
    def from_dict(cls, data: dict) -> Segment:
        return cls(
            id=data["id"],
            seek=data["seek"],
            start=data["start"],
            end=data["end"],
            text=data["text"],
            tokens=list(data["tokens"]),
            temperature=data["temperature"],
            avg_logprob=data["avg_logprob"],
            compression_ratio=data["compression_ratio"],
            no_speech_prob=data["no_speech_prob"],
        )


@dataclass(frozen=True)
class Word:
    word: str
    start: float
    end: float

    @classmethod
    def from_dict(cls, data: dict) -> Word:
        return cls(word=data["word"], start=data["start"], end=data["end"])


@dataclass(frozen=True)
class VerboseJsonResponse:
    """Transcript with language, duration, and timing detail."""

    task: str | None
    language: str
    duration: float
    text: str
    segments: list[Segment] | None = None
    words: list[Word] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> VerboseJsonResponse:
        segments = data.get("segments")
        words = data.get("words")
        return cls(
            task=data.get("task"),
            language=data["language"],
            duration=float(data["duration"]),
            text=data["text"],
            segments=(
                [Segment.from_dict(s) for s in segments]
                if segments is not None
                else None
            ),
            words=[Word.from_dict(w) for w in words] if words is not None else None,
        )

    def __str__(self) -> str:
        return self.text


def _decode(text: str) -> dict:
    try:
        data = json.loads(text)
    except ValueError as error:
        raise FormatJsonError(error, text) from error
    if not isinstance(data, dict):
        error = TypeError(f"expected a JSON object, got {type(data).__name__}")
        raise FormatJsonError(error, text)
    return data


class JsonFormatter(TextResponseFormatter):
    @property
    def response_format(self) -> str:
        return "json"

    def format(self, text: str) -> JsonResponse:
        data = _decode(text)
        try:
            return JsonResponse.from_dict(data)
        except (KeyError, TypeError, ValueError) as error:
            raise FormatJsonError(error, text) from error


class VerboseJsonFormatter(TextResponseFormatter):
    @property
    def response_format(self) -> str:
        return "verbose_json"

    def format(self, text: str) -> VerboseJsonResponse:
        data = _decode(text)
        try:
            return VerboseJsonResponse.from_dict(data)
        except (KeyError, TypeError, ValueError) as error:
            raise FormatJsonError(error, text) from error
