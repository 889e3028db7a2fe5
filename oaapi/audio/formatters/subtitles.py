"""The ``srt`` and ``vtt`` response formats.

WHY: Subtitle output is the format editors load straight into a video
tool, but callers often want to adjust it first (shift timings, merge
cues). Parsing into cue objects makes that possible, and ``str()``
writes the file back out.

HOW: Blocks are split on blank lines. SubRip blocks are index, timing
line, text lines. WebVTT starts with a ``WEBVTT`` line; each block has
an optional identifier, a timing line with optional cue settings, and
text lines. NOTE, STYLE and REGION blocks are skipped. Timestamps are
kept as ``datetime.timedelta`` with millisecond precision.

RULES:
- SubRip timestamps: HH:MM:SS,mmm
- WebVTT timestamps: [HH:]MM:SS.mmm, always written with hours
- CRLF line endings are accepted
- Malformed input raises ParseSrtError / ParseVttError with the raw text
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta

from oaapi.audio.formatters.base import (
    ParseSrtError,
    ParseVttError,
    TextResponseFormatter,
)

_SRT_TIMESTAMP = re.compile(r"^(\d{2,}):(\d{2}):(\d{2}),(\d{3})$")
_VTT_TIMESTAMP = re.compile(r"^(?:(\d{2,}):)?(\d{2}):(\d{2})\.(\d{3})$")
_VTT_SKIPPED_BLOCKS = ("NOTE", "STYLE", "REGION")

_ONE_MS = timedelta(milliseconds=1)


# =============================================================================
# Timestamps
# =============================================================================


def _split_ms(value: timedelta) -> tuple:
    millis = value // _ONE_MS
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return hours, minutes, secs, millis


def format_srt_timestamp(value: timedelta) -> str:
    """Format a time offset as HH:MM:SS,mmm."""
    return "{:02d}:{:02d}:{:02d},{:03d}".format(*_split_ms(value))


def format_vtt_timestamp(value: timedelta) -> str:
    """Format a time offset as HH:MM:SS.mmm."""
    return "{:02d}:{:02d}:{:02d}.{:03d}".format(*_split_ms(value))


def _to_timedelta(hours: str | None, minutes: str, secs: str, millis: str) -> timedelta:
    if int(minutes) >= 60 or int(secs) >= 60:
        raise ValueError("minutes and seconds must be below 60")
    return timedelta(
        hours=int(hours or 0),
        minutes=int(minutes),
        seconds=int(secs),
        milliseconds=int(millis),
    )


def parse_srt_timestamp(text: str) -> timedelta:
    match = _SRT_TIMESTAMP.match(text)
    if match is None:
        raise ValueError(f"invalid SubRip timestamp: {text!r}")
    return _to_timedelta(*match.groups())


def parse_vtt_timestamp(text: str) -> timedelta:
    match = _VTT_TIMESTAMP.match(text)
    if match is None:
        raise ValueError(f"invalid WebVTT timestamp: {text!r}")
    return _to_timedelta(*match.groups())


def _blocks(text: str) -> list[list[str]]:
    """Split text into blocks of non-blank lines."""
    blocks: list[list[str]] = []
    current: list[str] = []
    for line in text.replace("\r\n", "\n").split("\n"):
        if line.strip():
            current.append(line)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


# =============================================================================
# SubRip
# =============================================================================


@dataclass(frozen=True)
class SubRipCue:
    index: int
    start: timedelta
    end: timedelta
    text: str

    def __str__(self) -> str:
        return "{}\n{} --> {}\n{}\n".format(
            self.index,
            format_srt_timestamp(self.start),
            format_srt_timestamp(self.end),
            self.text,
        )


@dataclass(frozen=True)
class SubRip:
    """A parsed SubRip (.srt) document."""

    cues: list[SubRipCue] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> SubRip:
        """Parse SubRip text.

        Raises:
            ParseSrtError: a block is missing its index or timing line, or
                a timestamp is malformed.
        """
        try:
            return cls(cues=[_parse_srt_block(block) for block in _blocks(text)])
        except ValueError as error:
            raise ParseSrtError(error, text) from error

    def __str__(self) -> str:
        return "\n".join(str(cue) for cue in self.cues)


def _parse_srt_block(lines: list[str]) -> SubRipCue:
    if len(lines) < 2:
        raise ValueError(f"incomplete cue: {lines!r}")
    index = int(lines[0].strip())
    start, separator, end = lines[1].partition(" --> ")
    if not separator:
        raise ValueError(f"invalid timing line: {lines[1]!r}")
    return SubRipCue(
        index=index,
        start=parse_srt_timestamp(start.strip()),
        end=parse_srt_timestamp(end.strip()),
        text="\n".join(lines[2:]),
    )


# =============================================================================
# WebVTT
# =============================================================================


@dataclass(frozen=True)
class WebVttCue:
    start: timedelta
    end: timedelta
    text: str
    identifier: str | None = None
    settings: str | None = None

    def __str__(self) -> str:
        lines = []
        if self.identifier:
            lines.append(self.identifier)
        timing = "{} --> {}".format(
            format_vtt_timestamp(self.start), format_vtt_timestamp(self.end)
        )
        if self.settings:
            timing += " " + self.settings
        lines.append(timing)
        lines.append(self.text)
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class WebVtt:
    """A parsed WebVTT (.vtt) document."""

    cues: list[WebVttCue] = field(default_factory=list)
    header: str = ""

    @classmethod
    def from_text(cls, text: str) -> WebVtt:
        """Parse WebVTT text.

        Raises:
            ParseVttError: the WEBVTT signature is missing, a timing line
                is malformed, or a timestamp is invalid.
        """
        try:
            return _parse_vtt(text)
        except ValueError as error:
            raise ParseVttError(error, text) from error

    def __str__(self) -> str:
        signature = "WEBVTT" + (" " + self.header if self.header else "")
        return "\n".join([signature + "\n"] + [str(cue) for cue in self.cues])


def _parse_vtt(text: str) -> WebVtt:
    blocks = _blocks(text.lstrip("\ufeff"))
    if not blocks or not blocks[0][0].startswith("WEBVTT"):
        raise ValueError("missing WEBVTT signature")
    signature = blocks[0][0]
    if len(signature) > 6 and signature[6] not in " \t":
        raise ValueError(f"invalid signature line: {signature!r}")
    header = signature[6:].strip()

    cues = []
    for block in blocks[1:]:
        if block[0].split(" ", 1)[0] in _VTT_SKIPPED_BLOCKS and "-->" not in block[0]:
            continue
        cues.append(_parse_vtt_block(block))
    return WebVtt(cues=cues, header=header)


def _parse_vtt_block(lines: list[str]) -> WebVttCue:
    identifier = None
    if "-->" not in lines[0]:
        identifier = lines[0]
        lines = lines[1:]
    if not lines:
        raise ValueError(f"cue {identifier!r} has no timing line")
    parts = lines[0].split()
    if len(parts) < 3 or parts[1] != "-->":
        raise ValueError(f"invalid timing line: {lines[0]!r}")
    return WebVttCue(
        start=parse_vtt_timestamp(parts[0]),
        end=parse_vtt_timestamp(parts[2]),
        text="\n".join(lines[1:]),
        identifier=identifier,
        settings=" ".join(parts[3:]) or None,
    )


# =============================================================================
# Formatters
# =============================================================================


class SrtFormatter(TextResponseFormatter):
    @property
    def response_format(self) -> str:
        return "srt"

    def format(self, text: str) -> SubRip:
        return SubRip.from_text(text)


class VttFormatter(TextResponseFormatter):
    @property
    def response_format(self) -> str:
        return "vtt"

    def format(self, text: str) -> WebVtt:
        return WebVtt.from_text(text)
