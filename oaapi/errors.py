"""Exceptions shared by every endpoint of the client.

WHY: Callers need to tell apart "the request never made it" from "the API
said no" from "the API answered something we cannot read". Each case gets
its own exception type carrying the context needed to diagnose it.

HOW: ClientError and its subclasses wrap transport and decoding failures.
ApiError wraps a non-2xx response together with the parsed error body.

RULES:
- ApiError always carries status_code and the parsed ErrorResponse
- Deserialization errors keep the raw response text
- Request body validation errors are pydantic.ValidationError (re-exported)
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

__all__ = [
    "ApiError",
    "ApiErrorBody",
    "ClientError",
    "ErrorResponse",
    "ErrorResponseDeserializationError",
    "HttpRequestError",
    "ResponseDeserializationError",
    "ValidationError",
]


@dataclass(frozen=True)
class ApiErrorBody:
    """The ``error`` object of an API error response."""

    message: str
    type: str
    code: str | None = None
    param: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ApiErrorBody:
        return cls(
            message=data["message"],
            type=data["type"],
            code=data.get("code"),
            param=data.get("param"),
        )


@dataclass(frozen=True)
class ErrorResponse:
    """Body of a non-2xx response: ``{"error": {...}}``."""

    error: ApiErrorBody

    @classmethod
    def from_dict(cls, data: dict) -> ErrorResponse:
        return cls(error=ApiErrorBody.from_dict(data["error"]))


class ClientError(Exception):
    """Base class for failures on our side of the wire."""


class HttpRequestError(ClientError):
    """Raised when the HTTP request could not be sent or read.

    RULES:
    - error is the underlying httpx exception
    """

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"HTTP request error: {error!r}")


class ResponseDeserializationError(ClientError):
    """Raised when a 2xx response body does not match the expected shape."""

    def __init__(self, error: Exception, text: str) -> None:
        self.error = error
        self.text = text
        super().__init__(
            f"Failed to deserialize response as JSON: {error!r}, {text!r}"
        )


class ErrorResponseDeserializationError(ClientError):
    """Raised when a non-2xx response body is not a valid error response."""

    def __init__(self, error: Exception, text: str) -> None:
        self.error = error
        self.text = text
        super().__init__(
            f"Failed to deserialize error response as JSON: {error!r}, {text!r}"
        )


class ApiError(Exception):
    """Raised when the API returns a non-2xx response.

    WHY: Callers need the status code and the API's own error message to
    decide whether to fix the request, wait, or give up.

    RULES:
    - status_code is the HTTP status
    - error_response is the parsed body
    """

    def __init__(self, status_code: int, error_response: ErrorResponse) -> None:
        self.status_code = status_code
        self.error_response = error_response
        super().__init__(
            f"API error with status code: {status_code}, "
            f"error: {error_response.error.message}"
        )
