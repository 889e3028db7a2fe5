"""oaapi: an async client for the OpenAI audio and chat APIs.

WHY: Speech, transcription, translation and chat completion are four
endpoints with different request shapes (JSON, multipart) and response
shapes (binary stream, text formats, JSON, event stream). This package
gives each one a validated request model and a typed result.

HOW: Client owns the authenticated httpx connection. Endpoint modules
(audio.api, chat.api) build requests and interpret responses. Streamed
chat responses are decoded incrementally by chat.ChunkStream.

RULES:
- Request bodies validate on construction (pydantic)
- Non-2xx answers raise ApiError; transport failures raise ClientError
- Streamed responses are async context managers that own the connection
"""

from oaapi.client import Client
from oaapi.errors import (
    ApiError,
    ClientError,
    ErrorResponse,
    ErrorResponseDeserializationError,
    HttpRequestError,
    ResponseDeserializationError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "Client",
    "ClientError",
    "ErrorResponse",
    "ErrorResponseDeserializationError",
    "HttpRequestError",
    "ResponseDeserializationError",
    "ValidationError",
    "__version__",
]
