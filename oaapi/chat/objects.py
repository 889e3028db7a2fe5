"""Chat completion response dataclasses.

WHY: The chat endpoint returns nested JSON objects, both as one complete
response and as a stream of incremental chunks. Typed dataclasses make
these structures explicit and catch shape mismatches at parse time.

HOW: Each dataclass maps 1:1 to an API JSON object. ``from_dict`` factory
methods parse raw dicts through ``_required`` and ``_optional``: a missing
required key raises KeyError and a value of the wrong JSON type raises
TypeError, so a malformed payload never becomes an object.

RULES:
- bool never counts as a number
- Objects are frozen; they are handed to the caller and never mutated
- ``model`` stays a raw string (servers answer with dated model ids)
- ``role`` is parsed into the Role enum; an unknown role raises ValueError
- Tool-call fragments in a chunk carry an ``index`` and partial fields
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from oaapi.chat.models import Role


def _required(data: dict, key: str, kind: type | tuple[type, ...]) -> Any:
    """Return data[key]; KeyError if absent, TypeError if not a ``kind``."""
    return _checked(key, data[key], kind)


def _optional(data: dict, key: str, kind: type | tuple[type, ...]) -> Any:
    """Return data.get(key); None passes, anything else must be a ``kind``."""
    value = data.get(key)
    if value is None:
        return None
    return _checked(key, value, kind)


def _checked(key: str, value: Any, kind: type | tuple[type, ...]) -> Any:
    # bool is an int subclass; no field here accepts it
    if isinstance(value, bool) or not isinstance(value, kind):
        raise TypeError(
            "field {!r} has unexpected type {}".format(key, type(value).__name__)
        )
    return value


_NUMBER = (int, float)


# ---------------------------------------------------------------------------
# Log probabilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TopLogprobsContent:
    token: str
    logprob: float
    bytes: list[int] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> TopLogprobsContent:
        return cls(
            token=_required(data, "token", str),
            logprob=_required(data, "logprob", _NUMBER),
            bytes=_optional(data, "bytes", list),
        )


@dataclass(frozen=True)
class LogprobsContent:
    token: str
    logprob: float
    bytes: list[int] | None = None
    top_logprobs: list[TopLogprobsContent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> LogprobsContent:
        return cls(
            token=_required(data, "token", str),
            logprob=_required(data, "logprob", _NUMBER),
            bytes=_optional(data, "bytes", list),
            top_logprobs=[
                TopLogprobsContent.from_dict(t)
                for t in _optional(data, "top_logprobs", list) or []
            ],
        )


@dataclass(frozen=True)
class Logprobs:
    content: list[LogprobsContent] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Logprobs:
        content = _optional(data, "content", list)
        if content is None:
            return cls()
        return cls(content=[LogprobsContent.from_dict(c) for c in content])


def _optional_logprobs(data: dict) -> Logprobs | None:
    raw = _optional(data, "logprobs", dict)
    return Logprobs.from_dict(raw) if raw is not None else None


def _optional_role(data: dict) -> Role | None:
    raw = _optional(data, "role", str)
    return Role(raw) if raw is not None else None


# ---------------------------------------------------------------------------
# Complete (non-streaming) response
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalledFunction:
    """Function name and JSON-encoded arguments chosen by the model."""

    name: str
    arguments: str

    @classmethod
    def from_dict(cls, data: dict) -> CalledFunction:
        return cls(
            name=_required(data, "name", str),
            arguments=_required(data, "arguments", str),
        )


@dataclass(frozen=True)
class ToolCall:
    id: str
    type: str
    function: CalledFunction

    @classmethod
    def from_dict(cls, data: dict) -> ToolCall:
        return cls(
            id=_required(data, "id", str),
            type=_required(data, "type", str),
            function=CalledFunction.from_dict(_required(data, "function", dict)),
        )


@dataclass(frozen=True)
class ChatCompletionMessage:
    role: Role
    content: str | None = None
    tool_calls: list[ToolCall] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletionMessage:
        tool_calls = _optional(data, "tool_calls", list)
        return cls(
            role=Role(_required(data, "role", str)),
            content=_optional(data, "content", str),
            tool_calls=(
                [ToolCall.from_dict(t) for t in tool_calls]
                if tool_calls is not None
                else None
            ),
        )


@dataclass(frozen=True)
class ChatCompletionChoice:
    index: int
    message: ChatCompletionMessage
    logprobs: Logprobs | None = None
    finish_reason: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletionChoice:
        return cls(
            index=_required(data, "index", int),
            message=ChatCompletionMessage.from_dict(_required(data, "message", dict)),
            logprobs=_optional_logprobs(data),
            finish_reason=_optional(data, "finish_reason", str),
        )


@dataclass(frozen=True)
class Usage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    @classmethod
    def from_dict(cls, data: dict) -> Usage:
        return cls(
            prompt_tokens=_required(data, "prompt_tokens", int),
            completion_tokens=_required(data, "completion_tokens", int),
            total_tokens=_required(data, "total_tokens", int),
        )


@dataclass(frozen=True)
class ChatCompletionObject:
    """Full response of POST /chat/completions without streaming."""

    id: str
    object: str
    created: int
    model: str
    choices: list[ChatCompletionChoice]
    usage: Usage | None = None
    system_fingerprint: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletionObject:
        usage = _optional(data, "usage", dict)
        return cls(
            id=_required(data, "id", str),
            object=_required(data, "object", str),
            created=_required(data, "created", int),
            model=_required(data, "model", str),
            choices=[
                ChatCompletionChoice.from_dict(c)
                for c in _required(data, "choices", list)
            ],
            usage=Usage.from_dict(usage) if usage is not None else None,
            system_fingerprint=_optional(data, "system_fingerprint", str),
        )

    def __str__(self) -> str:
        if not self.choices:
            return ""
        return self.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Streaming chunks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalledFunctionChunk:
    """Partial function call; ``arguments`` arrives in pieces."""

    name: str | None = None
    arguments: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> CalledFunctionChunk:
        return cls(
            name=_optional(data, "name", str),
            arguments=_optional(data, "arguments", str),
        )


@dataclass(frozen=True)
class ToolCallChunk:
    """Fragment of a tool call; fragments with the same index belong together."""

    index: int
    id: str | None = None
    type: str | None = None
    function: CalledFunctionChunk | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ToolCallChunk:
        function = _optional(data, "function", dict)
        return cls(
            index=_required(data, "index", int),
            id=_optional(data, "id", str),
            type=_optional(data, "type", str),
            function=(
                CalledFunctionChunk.from_dict(function)
                if function is not None
                else None
            ),
        )


@dataclass(frozen=True)
class ChatCompletionDelta:
    role: Role | None = None
    content: str | None = None
    tool_calls: list[ToolCallChunk] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletionDelta:
        tool_calls = _optional(data, "tool_calls", list)
        return cls(
            role=_optional_role(data),
            content=_optional(data, "content", str),
            tool_calls=(
                [ToolCallChunk.from_dict(t) for t in tool_calls]
                if tool_calls is not None
                else None
            ),
        )


@dataclass(frozen=True)
class ChatCompletionChunkChoice:
    index: int
    delta: ChatCompletionDelta | None = None
    logprobs: Logprobs | None = None
    finish_reason: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletionChunkChoice:
        delta = _optional(data, "delta", dict)
        return cls(
            index=_required(data, "index", int),
            delta=ChatCompletionDelta.from_dict(delta) if delta is not None else None,
            logprobs=_optional_logprobs(data),
            finish_reason=_optional(data, "finish_reason", str),
        )


@dataclass(frozen=True)
class ChatCompletionChunkObject:
    """One event of a streamed chat completion.

    WHY: A streamed response delivers the message piece by piece; each
    event carries the deltas of every choice since the previous event.

    RULES:
    - id, object, created, model, choices are required
    - system_fingerprint is optional
    - str() gives the content delta of the first choice ("" if none)
    """

    id: str
    object: str
    created: int
    model: str
    choices: list[ChatCompletionChunkChoice]
    system_fingerprint: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ChatCompletionChunkObject:
        return cls(
            id=_required(data, "id", str),
            object=_required(data, "object", str),
            created=_required(data, "created", int),
            model=_required(data, "model", str),
            choices=[
                ChatCompletionChunkChoice.from_dict(c)
                for c in _required(data, "choices", list)
            ],
            system_fingerprint=_optional(data, "system_fingerprint", str),
        )

    def __str__(self) -> str:
        if not self.choices or self.choices[0].delta is None:
            return ""
        return self.choices[0].delta.content or ""
