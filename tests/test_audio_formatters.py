"""Tests for the audio response formatter registry and parsers.

WHY: Transcription results are only useful if each text format parses
into the right structure, and subtitle files must come back out the way
editors expect them.

RULES:
- Sample bodies follow the shapes the transcription endpoint returns
- Malformed bodies raise the matching TextFormatError subclass
"""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from oaapi.audio.formatters import (
    FORMATTERS,
    FormatJsonError,
    JsonResponse,
    ParseSrtError,
    ParseVttError,
    SubRip,
    TextFormatError,
    TextResponseFormatter,
    VerboseJsonResponse,
    WebVtt,
)
from oaapi.audio.formatters.subtitles import (
    format_srt_timestamp,
    format_vtt_timestamp,
    parse_vtt_timestamp,
)

SRT_TEXT = (
    "1\n"
    "00:00:00,000 --> 00:00:02,500\n"
    "How are you doing today?\n"
    "\n"
    "2\n"
    "00:00:02,500 --> 01:02:03,004\n"
    "I am fantastic,\n"
    "thank you.\n"
    "\n"
)

VTT_TEXT = (
    "WEBVTT\n"
    "\n"
    "00:00:00.000 --> 00:00:02.500\n"
    "How are you doing today?\n"
    "\n"
    "intro-2\n"
    "00:02.500 --> 00:04.000 align:start\n"
    "I am fantastic.\n"
    "\n"
)

VERBOSE_JSON = {
    "task": "transcribe",
    "language": "english",
    "duration": 4.0,
    "text": "How are you doing today? I am fantastic.",
    "segments": [
        {
            "id": 0,
            "seek": 0,
            "start": 0.0,
            "end": 2.5,
            "text": " How are you doing today?",
            "tokens": [50364, 1012, 366],
            "temperature": 0.0,
            "avg_logprob": -0.25,
            "compression_ratio": 0.9,
            "no_speech_prob": 0.01,
        }
    ],
    "words": [
        {"word": "How", "start": 0.0, "end": 0.3},
        {"word": "are", "start": 0.3, "end": 0.5},
    ],
}


class TestRegistry:
    def test_keys_are_wire_formats(self):
        assert set(FORMATTERS) == {"json", "text", "verbose_json", "srt", "vtt"}

    def test_entries_are_formatter_classes(self):
        for key, formatter_cls in FORMATTERS.items():
            formatter = formatter_cls()
            assert isinstance(formatter, TextResponseFormatter)
            assert formatter.response_format == key

    def test_plain_text_passes_through(self):
        assert FORMATTERS["text"]().format("hello\n") == "hello\n"


class TestJsonFormats:
    def test_json(self):
        result = FORMATTERS["json"]().format('{"text": "Hello."}')
        assert result == JsonResponse(text="Hello.")
        assert str(result) == "Hello."

    def test_verbose_json(self):
        result = FORMATTERS["verbose_json"]().format(json.dumps(VERBOSE_JSON))
        assert isinstance(result, VerboseJsonResponse)
        assert result.language == "english"
        assert result.duration == 4.0
        assert result.segments[0].tokens == [50364, 1012, 366]
        assert result.segments[0].end == 2.5
        assert [w.word for w in result.words] == ["How", "are"]

    def test_verbose_json_without_words(self):
        data = dict(VERBOSE_JSON)
        del data["words"]
        result = FORMATTERS["verbose_json"]().format(json.dumps(data))
        assert result.words is None
        assert len(result.segments) == 1

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '{"txt": "x"}'])
    def test_malformed_json(self, text):
        with pytest.raises(FormatJsonError) as excinfo:
            FORMATTERS["json"]().format(text)
        assert excinfo.value.text == text
        assert isinstance(excinfo.value, TextFormatError)

    def test_verbose_json_missing_field(self):
        with pytest.raises(FormatJsonError):
            FORMATTERS["verbose_json"]().format('{"text": "x"}')


class TestSubRip:
    def test_parse(self):
        srt = FORMATTERS["srt"]().format(SRT_TEXT)
        assert isinstance(srt, SubRip)
        assert [cue.index for cue in srt.cues] == [1, 2]
        assert srt.cues[0].end == timedelta(seconds=2.5)
        assert srt.cues[1].end == timedelta(hours=1, minutes=2, seconds=3, milliseconds=4)
        assert srt.cues[1].text == "I am fantastic,\nthank you."

    def test_render_round_trip(self):
        assert str(SubRip.from_text(SRT_TEXT)) == SRT_TEXT.rstrip("\n") + "\n"

    def test_crlf_input(self):
        srt = SubRip.from_text(SRT_TEXT.replace("\n", "\r\n"))
        assert len(srt.cues) == 2
        assert srt.cues[0].text == "How are you doing today?"

    def test_empty_document(self):
        assert SubRip.from_text("").cues == []

    @pytest.mark.parametrize(
        "text",
        [
            "one\n00:00:00,000 --> 00:00:01,000\nx\n",
            "1\n00:00:00.000 --> 00:00:01.000\nx\n",
            "1\n00:00:00,000 00:00:01,000\nx\n",
            "1\n",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(ParseSrtError) as excinfo:
            SubRip.from_text(text)
        assert excinfo.value.text == text

    def test_timestamp_formatting(self):
        assert format_srt_timestamp(timedelta(seconds=3723, milliseconds=45)) == "01:02:03,045"


class TestWebVtt:
    def test_parse(self):
        vtt = FORMATTERS["vtt"]().format(VTT_TEXT)
        assert isinstance(vtt, WebVtt)
        assert len(vtt.cues) == 2
        first, second = vtt.cues
        assert first.identifier is None
        assert first.end == timedelta(seconds=2.5)
        assert second.identifier == "intro-2"
        assert second.start == timedelta(seconds=2.5)
        assert second.settings == "align:start"
        assert second.text == "I am fantastic."

    def test_render_writes_hours(self):
        rendered = str(WebVtt.from_text(VTT_TEXT))
        assert rendered.startswith("WEBVTT\n\n00:00:00.000 --> 00:00:02.500\n")
        assert "intro-2\n00:00:02.500 --> 00:00:04.000 align:start\n" in rendered

    def test_header_and_notes(self):
        text = "WEBVTT - Interview\n\nNOTE written by hand\n\n00:01.000 --> 00:02.000\nHi\n"
        vtt = WebVtt.from_text(text)
        assert vtt.header == "- Interview"
        assert [cue.text for cue in vtt.cues] == ["Hi"]

    @pytest.mark.parametrize(
        "text",
        [
            "00:00.000 --> 00:01.000\nx\n",
            "WEBVTTX\n\n00:00.000 --> 00:01.000\nx\n",
            "WEBVTT\n\n00:00,000 --> 00:01,000\nx\n",
            "WEBVTT\n\nid-only\n",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(ParseVttError) as excinfo:
            WebVtt.from_text(text)
        assert excinfo.value.text == text

    def test_short_timestamp(self):
        assert parse_vtt_timestamp("01:02.003") == timedelta(minutes=1, seconds=2, milliseconds=3)
        assert format_vtt_timestamp(timedelta(minutes=1, seconds=2, milliseconds=3)) == "00:01:02.003"
