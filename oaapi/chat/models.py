"""Pydantic request models for the chat completions endpoint.

WHY: The chat endpoint accepts a large body with many range-limited
parameters. Validating at construction time gives a clear error pointing
at the bad field instead of an opaque 400 from the API.

HOW: Each JSON object of the request is a pydantic model. Messages are a
union discriminated on ``role``; content parts are discriminated on
``type``. Numeric ranges are Field constraints, and the one cross-field
rule (max_tokens vs. the model's context window) is a model validator.

RULES:
- Unset optional fields are omitted from the wire body (to_request_json)
- Enum values match the API strings exactly
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Role(str, Enum):
    """Author role of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ChatModel(str, Enum):
    """Chat model identifiers accepted in a request.

    RULES:
    - Values are the API model ids
    - context_window is the maximum token count of prompt plus completion
    """

    GPT_35_TURBO_0125 = "gpt-3.5-turbo-0125"
    GPT_35_TURBO_1106 = "gpt-3.5-turbo-1106"
    GPT_35_TURBO_0613 = "gpt-3.5-turbo-0613"
    GPT_35_TURBO = "gpt-3.5-turbo"
    GPT_35_TURBO_16K = "gpt-3.5-turbo-16k"
    GPT_35_TURBO_INSTRUCT = "gpt-3.5-turbo-instruct"
    GPT_4_0125_PREVIEW = "gpt-4-0125-preview"
    GPT_4_1106_VISION_PREVIEW = "gpt-4-1106-vision-preview"
    GPT_4_1106_PREVIEW = "gpt-4-1106-preview"
    GPT_4_VISION_PREVIEW = "gpt-4-vision-preview"
    GPT_4 = "gpt-4"
    GPT_4_32K = "gpt-4-32k"
    GPT_4_0613 = "gpt-4-0613"
    GPT_4_32K_0613 = "gpt-4-32k-0613"

    @property
    def context_window(self) -> int:
        return _CONTEXT_WINDOWS[self]


_CONTEXT_WINDOWS: Dict[ChatModel, int] = {
    ChatModel.GPT_35_TURBO_0125: 16385,
    ChatModel.GPT_35_TURBO_1106: 16385,
    ChatModel.GPT_35_TURBO_0613: 4096,
    ChatModel.GPT_35_TURBO: 4096,
    ChatModel.GPT_35_TURBO_16K: 16385,
    ChatModel.GPT_35_TURBO_INSTRUCT: 4096,
    ChatModel.GPT_4_0125_PREVIEW: 128000,
    ChatModel.GPT_4_1106_VISION_PREVIEW: 128000,
    ChatModel.GPT_4_1106_PREVIEW: 128000,
    ChatModel.GPT_4_VISION_PREVIEW: 128000,
    ChatModel.GPT_4: 8192,
    ChatModel.GPT_4_32K: 32768,
    ChatModel.GPT_4_0613: 8192,
    ChatModel.GPT_4_32K_0613: 32768,
}


class ImageDetail(str, Enum):
    AUTO = "auto"
    LOW = "low"
    HIGH = "high"


class ToolChoiceOption(str, Enum):
    NONE = "none"
    AUTO = "auto"


# ---------------------------------------------------------------------------
# Message content
# ---------------------------------------------------------------------------


class TextContentPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    """An image reference: an https URL or a ``data:image/...;base64,`` URL."""

    url: str
    detail: Optional[ImageDetail] = None


class ImageContentPart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


MessageContentPart = Annotated[
    Union[TextContentPart, ImageContentPart],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class SystemMessage(BaseModel):
    role: Literal["system"] = "system"
    content: str
    name: Optional[str] = None


class UserMessage(BaseModel):
    """A user turn: plain text, or a list of text and image parts."""

    role: Literal["user"] = "user"
    content: Union[str, List[MessageContentPart]]
    name: Optional[str] = None


class FunctionCall(BaseModel):
    name: str
    arguments: str


class ToolCallParam(BaseModel):
    """A tool call made by the assistant in an earlier turn."""

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class AssistantMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: Optional[str] = None
    name: Optional[str] = None
    tool_calls: Optional[List[ToolCallParam]] = None


class ToolMessage(BaseModel):
    """The result of a tool call, answering ``tool_call_id``."""

    role: Literal["tool"] = "tool"
    content: str
    tool_call_id: str


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage],
    Field(discriminator="role"),
]


# ---------------------------------------------------------------------------
# Tools and response format
# ---------------------------------------------------------------------------


class Function(BaseModel):
    """A function the model may call; ``parameters`` is a JSON Schema object."""

    name: str
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class Tool(BaseModel):
    type: Literal["function"] = "function"
    function: Function


class SpecifiedFunction(BaseModel):
    name: str


class SpecifiedTool(BaseModel):
    type: Literal["function"] = "function"
    function: SpecifiedFunction


ToolChoice = Union[ToolChoiceOption, SpecifiedTool]


class ResponseFormat(BaseModel):
    type: Literal["text", "json_object"] = "text"


# ---------------------------------------------------------------------------
# Request body
# ---------------------------------------------------------------------------

Bias = Annotated[float, Field(ge=-100.0, le=100.0)]
Penalty = Annotated[float, Field(ge=-2.0, le=2.0)]


class CompletionsRequestBody(BaseModel):
    """Body of POST /chat/completions.

    WHY: One typed object instead of a loose dict means typos and
    out-of-range values fail before the request leaves the process.

    RULES:
    - frequency_penalty / presence_penalty: -2.0 to 2.0
    - logit_bias values: -100 to 100
    - top_logprobs: 0 to 5
    - max_tokens: 1 to the model's context window
    - stop: one string or up to 4 strings
    - temperature, top_p: 0.0 to 1.0
    - stream must be unset/False for complete() and True for complete_stream()
    """

    messages: List[Message]
    model: ChatModel = ChatModel.GPT_35_TURBO
    frequency_penalty: Optional[Penalty] = None
    logit_bias: Optional[Dict[str, Bias]] = None
    logprobs: Optional[bool] = None
    top_logprobs: Optional[int] = Field(default=None, ge=0, le=5)
    max_tokens: Optional[int] = None
    n: Optional[int] = Field(default=None, ge=1)
    presence_penalty: Optional[Penalty] = None
    response_format: Optional[ResponseFormat] = None
    seed: Optional[int] = None
    stop: Optional[Union[str, Annotated[List[str], Field(max_length=4)]]] = None
    stream: Optional[bool] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    tools: Optional[List[Tool]] = None
    tool_choice: Optional[ToolChoice] = None
    user: Optional[str] = None

    @model_validator(mode="after")
    def _check_max_tokens(self) -> CompletionsRequestBody:
        if self.max_tokens is not None:
            window = self.model.context_window
            if not 1 <= self.max_tokens <= window:
                raise ValueError(
                    "The max tokens count must be between 1 and {}, "
                    "but got {}.".format(window, self.max_tokens)
                )
        return self

    def to_request_json(self) -> Dict[str, Any]:
        """Serialize to the wire shape, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)
