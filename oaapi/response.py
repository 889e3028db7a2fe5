"""Turning httpx responses into typed results or exceptions.

WHY: Every endpoint answers errors in the same ``{"error": {...}}`` shape
and successes as JSON or text. Checking the status and decoding the body
the same way everywhere keeps the endpoint modules short.

RULES:
- The response body must already be read (not a streamed, unread body)
- 2xx passes through; non-2xx raises ApiError
- An unreadable error body raises ErrorResponseDeserializationError
- An unreadable success body raises ResponseDeserializationError
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TypeVar

import httpx

from oaapi.errors import (
    ApiError,
    ErrorResponse,
    ErrorResponseDeserializationError,
    ResponseDeserializationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def raise_for_api_error(response: httpx.Response) -> None:
    """Raise ApiError for a non-2xx response; return silently otherwise."""
    if response.is_success:
        return
    logger.warning(
        "API error %d on %s %s",
        response.status_code,
        response.request.method,
        response.request.url.path,
    )
    text = response.text
    try:
        error_response = ErrorResponse.from_dict(json.loads(text))
    except (ValueError, KeyError, TypeError) as error:
        raise ErrorResponseDeserializationError(error, text) from error
    raise ApiError(response.status_code, error_response)


def parse_json_response(
    response: httpx.Response, factory: Callable[[dict], T]
) -> T:
    """Check the status, then build a typed object from the JSON body."""
    raise_for_api_error(response)
    text = response.text
    try:
        return factory(json.loads(text))
    except (ValueError, KeyError, TypeError) as error:
        raise ResponseDeserializationError(error, text) from error
