"""Chat completions: request models, response objects, and the chunk stream.

WHY: Chat is the one endpoint with a streamed, line-framed response. The
package groups its request models, the typed response objects, and the
stream decoder that turns response bytes into chunk objects.

RULES:
- Request bodies are pydantic models (models.py)
- Responses are frozen dataclasses (objects.py)
- The streaming decoder lives in chunk_stream.py, its buffer in line_buffer.py
"""

from oaapi.chat.chunk_stream import ChunkStream
from oaapi.chat.errors import (
    ChatChunkError,
    ChunkDeserializationError,
    DataPrefixMissingError,
    StreamOptionMismatchError,
    StreamTransportError,
    StringDecodingError,
)
from oaapi.chat.line_buffer import LineBuffer
from oaapi.chat.models import (
    AssistantMessage,
    ChatModel,
    CompletionsRequestBody,
    Function,
    ImageContentPart,
    ImageDetail,
    ImageUrl,
    ResponseFormat,
    Role,
    SpecifiedFunction,
    SpecifiedTool,
    SystemMessage,
    TextContentPart,
    Tool,
    ToolChoiceOption,
    ToolMessage,
    UserMessage,
)
from oaapi.chat.objects import (
    ChatCompletionChunkChoice,
    ChatCompletionChunkObject,
    ChatCompletionDelta,
    ChatCompletionObject,
    ToolCall,
    ToolCallChunk,
)

__all__ = [
    "AssistantMessage",
    "ChatChunkError",
    "ChatCompletionChunkChoice",
    "ChatCompletionChunkObject",
    "ChatCompletionDelta",
    "ChatCompletionObject",
    "ChatModel",
    "ChunkDeserializationError",
    "ChunkStream",
    "CompletionsRequestBody",
    "DataPrefixMissingError",
    "Function",
    "ImageContentPart",
    "ImageDetail",
    "ImageUrl",
    "LineBuffer",
    "ResponseFormat",
    "Role",
    "SpecifiedFunction",
    "SpecifiedTool",
    "StreamOptionMismatchError",
    "StreamTransportError",
    "StringDecodingError",
    "SystemMessage",
    "TextContentPart",
    "Tool",
    "ToolCall",
    "ToolCallChunk",
    "ToolChoiceOption",
    "ToolMessage",
    "UserMessage",
]
