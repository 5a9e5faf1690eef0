"""External model adapters used by model-backed scoring agents.

The provider SDKs are imported lazily on first request, so both
builtin adapters can be imported without their optional extras.
"""

from imgscore.adapters.anthropic_adapter import AnthropicAdapter
from imgscore.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    ImageAttachment,
    Message,
    TokenUsage,
    ToolCallResult,
)
from imgscore.adapters.openai_adapter import OpenAIAdapter
from imgscore.adapters.registry import get_adapter

__all__ = [
    "AdapterConfig",
    "AdapterTurnResult",
    "AnthropicAdapter",
    "BaseAdapter",
    "ImageAttachment",
    "Message",
    "OpenAIAdapter",
    "TokenUsage",
    "ToolCallResult",
    "get_adapter",
]
