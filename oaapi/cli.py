"""Command-line interface for the OpenAI audio and chat client.

WHY: Trying an endpoint should not require writing a script. The CLI
exposes each endpoint as a subcommand with the request fields as flags,
and doubles as a worked example of the library API.

HOW: Uses argparse subcommands (speech, transcribe, translate, chat).
Each subcommand builds a validated request body, opens a Client, and
runs the call via asyncio.run(). Results go to stdout (or --output);
status messages go to stderr.

RULES:
- Request bodies are validated before any network call
- Status output goes to stderr (not stdout)
- Any library error is printed to stderr and exits with status 1
- --verbose turns on DEBUG logging for the oaapi loggers
- Python 3.9 compatible: no match/case, no X | Y unions
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from oaapi.audio import api as audio_api
from oaapi.audio.file import AudioFile
from oaapi.audio.formatters import FORMATTERS, TextFormatError
from oaapi.audio.models import (
    AudioModel,
    SpeechModel,
    SpeechRequestBody,
    SpeechResponseFormat,
    TimestampGranularity,
    TranscriptionsRequestBody,
    TranslationsRequestBody,
    Voice,
)
from oaapi.audio.speech_stream import SpeechStreamError
from oaapi.chat.errors import ChatChunkError
from oaapi.chat.models import (
    ChatModel,
    CompletionsRequestBody,
    ResponseFormat,
    SystemMessage,
    UserMessage,
)
from oaapi.client import Client
from oaapi.errors import ApiError, ClientError

_HANDLED_ERRORS = (
    ApiError,
    ClientError,
    ChatChunkError,
    SpeechStreamError,
    TextFormatError,
    ValueError,
    OSError,
)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _write_result(result: Any, output: str | None) -> None:
    text = str(result)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        _status("Saved: {}".format(output))
    else:
        print(text)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


async def _run_speech(args: argparse.Namespace) -> None:
    body = SpeechRequestBody(
        model=SpeechModel(args.model),
        input=args.input,
        voice=Voice(args.voice),
        response_format=SpeechResponseFormat(args.format) if args.format else None,
        speed=args.speed,
    )
    written = 0
    async with Client() as client:
        async with client.audio_speech(body) as stream:
            with open(args.output, "wb") as out:
                async for chunk in stream:
                    out.write(chunk)
                    written += len(chunk)
    _status("Saved {} bytes to {}".format(written, args.output))


async def _run_transcribe(args: argparse.Namespace) -> None:
    granularities = [TimestampGranularity.WORD] if args.word_timestamps else None
    body = TranscriptionsRequestBody(
        file=AudioFile.from_path(args.file),
        model=AudioModel.WHISPER_1,
        language=args.language,
        prompt=args.prompt,
        temperature=args.temperature,
        timestamp_granularities=granularities,
    )
    _status("Transcribing {}...".format(args.file))
    async with Client() as client:
        result = await audio_api.transcribe(client, body, args.format)
    _write_result(result, args.output)


async def _run_translate(args: argparse.Namespace) -> None:
    body = TranslationsRequestBody(
        file=AudioFile.from_path(args.file),
        model=AudioModel.WHISPER_1,
        prompt=args.prompt,
        temperature=args.temperature,
    )
    _status("Translating {}...".format(args.file))
    async with Client() as client:
        result = await audio_api.translate(client, body, args.format)
    _write_result(result, args.output)


def _chat_body(args: argparse.Namespace, stream: bool) -> CompletionsRequestBody:
    messages: list[Any] = []
    if args.prompt:
        messages.append(SystemMessage(content=args.prompt))
    messages.append(UserMessage(content=args.message))
    return CompletionsRequestBody(
        messages=messages,
        model=ChatModel(args.model),
        response_format=ResponseFormat(type="json_object") if args.json else None,
        stream=True if stream else None,
    )


async def _run_chat(args: argparse.Namespace) -> None:
    body = _chat_body(args, stream=args.stream)
    async with Client() as client:
        if args.stream:
            async with client.chat_complete_stream(body) as chunks:
                async for chunk in chunks:
                    print(str(chunk), end="", flush=True)
            print()
        else:
            completion = await client.chat_complete(body)
            print(str(completion))


_COMMANDS = {
    "speech": _run_speech,
    "transcribe": _run_transcribe,
    "translate": _run_translate,
    "chat": _run_chat,
}


async def _run(args: argparse.Namespace) -> None:
    """Run one subcommand, turning library errors into exit status 1."""
    try:
        await _COMMANDS[args.command](args)
    except _HANDLED_ERRORS as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_upload_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to the audio file to upload.")
    parser.add_argument(
        "--format",
        default="text",
        choices=list(FORMATTERS),
        help="Response format (default: %(default)s).",
    )
    parser.add_argument("--prompt", default=None, help="Text to guide the model's style.")
    parser.add_argument(
        "--temperature",
        type=float,
        default=None,
        help="Sampling temperature between 0 and 1.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the result to this file instead of stdout.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without touching the network.
    """
    parser = argparse.ArgumentParser(
        prog="oaapi",
        description="Call the OpenAI audio and chat APIs from the command line.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    speech = subparsers.add_parser("speech", help="Generate speech audio from text.")
    speech.add_argument("--input", required=True, help="Text to speak (max 4096 characters).")
    speech.add_argument(
        "--voice",
        default=Voice.ALLOY.value,
        choices=[v.value for v in Voice],
        help="Voice (default: %(default)s).",
    )
    speech.add_argument("--output", required=True, help="Path of the audio file to write.")
    speech.add_argument(
        "--model",
        default=SpeechModel.TTS_1.value,
        choices=[m.value for m in SpeechModel],
        help="Speech model (default: %(default)s).",
    )
    speech.add_argument(
        "--format",
        default=None,
        choices=[f.value for f in SpeechResponseFormat],
        help="Audio format (API default: mp3).",
    )
    speech.add_argument("--speed", type=float, default=None, help="Speed between 0.25 and 4.0.")

    transcribe = subparsers.add_parser("transcribe", help="Transcribe an audio file.")
    _add_upload_arguments(transcribe)
    transcribe.add_argument("--language", default=None, help="ISO 639-1 code of the audio language.")
    transcribe.add_argument(
        "--word-timestamps",
        action="store_true",
        help="Request word timestamps (requires --format verbose_json).",
    )

    translate = subparsers.add_parser("translate", help="Translate an audio file into English.")
    _add_upload_arguments(translate)

    chat = subparsers.add_parser("chat", help="Create a chat completion.")
    chat.add_argument("--message", required=True, help="User message.")
    chat.add_argument("--prompt", default=None, help="System prompt.")
    chat.add_argument(
        "--model",
        default=ChatModel.GPT_35_TURBO.value,
        choices=[m.value for m in ChatModel],
        help="Chat model (default: %(default)s).",
    )
    chat.add_argument("--stream", action="store_true", help="Print the reply as it streams.")
    chat.add_argument("--json", action="store_true", help="Ask for a JSON object reply.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``python -m oaapi`` and the ``oaapi`` script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
