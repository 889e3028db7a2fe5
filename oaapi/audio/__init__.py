"""Audio endpoints: text-to-speech, transcription, and translation.

RULES:
- Request bodies are pydantic models (models.py, file.py)
- Response bodies are parsed by the FORMATTERS registry (formatters/)
- Speech audio is streamed through SpeechStream (speech_stream.py)
"""

from oaapi.audio.file import SUPPORTED_FILE_FORMATS, AudioFile
from oaapi.audio.language import ISO_639_1_CODES, is_supported_language
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
from oaapi.audio.speech_stream import SpeechStream, SpeechStreamError

__all__ = [
    "AudioFile",
    "AudioModel",
    "ISO_639_1_CODES",
    "SUPPORTED_FILE_FORMATS",
    "SpeechModel",
    "SpeechRequestBody",
    "SpeechResponseFormat",
    "SpeechStream",
    "SpeechStreamError",
    "TimestampGranularity",
    "TranscriptionsRequestBody",
    "TranslationsRequestBody",
    "Voice",
    "is_supported_language",
]
