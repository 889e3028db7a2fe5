"""Pydantic request models for the audio endpoints.

WHY: Speech takes a JSON body, transcription and translation take a
multipart upload. Both carry range-limited parameters that are cheaper
to reject locally than to send and have the API refuse.

HOW: Each request is a pydantic model. SpeechRequestBody serializes to
JSON with ``to_request_json``. The upload bodies build their multipart
form with ``form_fields`` (text fields) and ``form_files`` (the audio).

RULES:
- Unset optional fields are omitted from the wire body
- Temperatures go out without a trailing ".0" for whole numbers
- Granularities go out as repeated ``timestamp_granularities[]`` fields
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from oaapi.audio.file import AudioFile
from oaapi.audio.language import is_supported_language


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class AudioModel(str, Enum):
    """Speech recognition model."""

    WHISPER_1 = "whisper-1"


class SpeechModel(str, Enum):
    """Text-to-speech model."""

    TTS_1 = "tts-1"
    TTS_1_HD = "tts-1-hd"


class Voice(str, Enum):
    ALLOY = "alloy"
    ECHO = "echo"
    FABLE = "fable"
    ONYX = "onyx"
    NOVA = "nova"
    SHIMMER = "shimmer"


class SpeechResponseFormat(str, Enum):
    """Audio container of a speech response. The API default is mp3."""

    MP3 = "mp3"
    OPUS = "opus"
    AAC = "aac"
    FLAC = "flac"


class TimestampGranularity(str, Enum):
    SEGMENT = "segment"
    WORD = "word"


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


class SpeechRequestBody(BaseModel):
    """Body of ``POST /audio/speech``."""

    model: SpeechModel = SpeechModel.TTS_1
    input: str = Field(min_length=1, max_length=4096)
    voice: Voice
    response_format: Optional[SpeechResponseFormat] = None
    speed: Optional[float] = Field(default=None, ge=0.25, le=4.0)

    def to_request_json(self) -> Dict[str, Any]:
        """Serialize to the wire shape, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Transcriptions and translations
# ---------------------------------------------------------------------------


def format_temperature(value: float) -> str:
    """Render a temperature the way the form expects: 0, 0.5, 1."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class _UploadRequestBody(BaseModel):
    file: AudioFile
    model: AudioModel = AudioModel.WHISPER_1
    prompt: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def form_fields(self, response_format: str) -> List[Tuple[str, str]]:
        """Text fields of the multipart form, in wire order."""
        fields = [
            ("model", self.model.value),
            ("response_format", response_format),
        ]
        if self.prompt is not None:
            fields.append(("prompt", self.prompt))
        if self.temperature is not None:
            fields.append(("temperature", format_temperature(self.temperature)))
        return fields

    def form_files(self) -> Dict[str, Tuple[str, bytes]]:
        return {"file": self.file.to_multipart()}


class TranscriptionsRequestBody(_UploadRequestBody):
    """Body of ``POST /audio/transcriptions``.

    RULES:
    - language must be a lowercase ISO 639-1 code
    - timestamp_granularities are only honoured with verbose_json output
    """

    language: Optional[str] = None
    timestamp_granularities: Optional[List[TimestampGranularity]] = None

    @field_validator("language")
    @classmethod
    def _check_language(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_supported_language(value):
            raise ValueError(
                "Unsupported language code {!r}; expected an ISO 639-1 "
                "code such as 'en' or 'ja'.".format(value)
            )
        return value

    def form_fields(self, response_format: str) -> List[Tuple[str, str]]:
        fields = super().form_fields(response_format)
        if self.language is not None:
            fields.append(("language", self.language))
        for granularity in self.timestamp_granularities or ():
            fields.append(("timestamp_granularities[]", granularity.value))
        return fields


class TranslationsRequestBody(_UploadRequestBody):
    """Body of ``POST /audio/translations``. Output is always English."""
