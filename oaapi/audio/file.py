"""Audio file upload part for transcription and translation requests.

WHY: The audio endpoints reject files in unsupported containers with a
400. Checking the extension before uploading saves a round trip with a
potentially large body.

HOW: AudioFile is a pydantic model holding the file name and bytes; the
name is validated on construction. ``to_multipart`` returns the tuple
httpx expects for a file part.

RULES:
- Supported extensions: flac, mp3, mp4, mpeg, mpga, m4a, ogg, wav, webm
- Extension check is case-insensitive
- An unsupported name raises pydantic.ValidationError (a ValueError)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator

SUPPORTED_FILE_FORMATS: tuple[str, ...] = (
    "flac", "mp3", "mp4", "mpeg", "mpga", "m4a", "ogg", "wav", "webm",
)


class AudioFile(BaseModel):
    """An in-memory audio file ready to be uploaded."""

    name: str
    data: bytes

    @field_validator("name")
    @classmethod
    def _check_format(cls, value: str) -> str:
        extension = value.rsplit(".", 1)[-1].lower() if "." in value else ""
        if extension not in SUPPORTED_FILE_FORMATS:
            raise ValueError(
                "The file format is not found or not supported: {!r}. "
                "Supported file formats are [{}]".format(
                    value, ", ".join(SUPPORTED_FILE_FORMATS)
                )
            )
        return value

    @classmethod
    def from_path(cls, path: str | Path) -> AudioFile:
        """Read a file from disk; the file name is taken from the path."""
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())

    def to_multipart(self) -> tuple[str, bytes]:
        return (self.name, self.data)

    def __str__(self) -> str:
        return "File: {}".format(self.name)
