"""BaseAdapter ABC and unified message/result dataclasses.

All external model adapters (OpenAI, Anthropic, custom) subclass
BaseAdapter and implement send_turn(). Model-backed scoring agents only
ever send a single system + user exchange, optionally with one image
attached to the user message.

These are plain dataclasses (not Pydantic) to keep adapter calls light.
"""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCallResult:
    """Result of a tool call extracted from the model response."""

    id: str
    name: str
    arguments: dict[str, Any]


@dataclass
class TokenUsage:
    """Token usage counts from a single adapter turn."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


@dataclass
class AdapterTurnResult:
    """Result of a single send_turn() call.

    Captures the model's text content, any tool calls, token usage,
    the raw provider response (for debugging), and the finish reason.
    """

    content: str | None
    tool_calls: list[ToolCallResult]
    usage: TokenUsage
    raw_response: dict[str, Any]
    finish_reason: str | None


@dataclass
class ImageAttachment:
    """Image bytes attached to a user message."""

    data: bytes
    media_type: str = "image/png"

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.to_base64()}"


@dataclass
class Message:
    """A single message sent to the model. Roles: system, user."""

    role: str
    content: str | None = None
    images: list[ImageAttachment] = field(default_factory=list)


@dataclass
class AdapterConfig:
    """Model name, generation parameters, and provider-specific extras."""

    model: str
    temperature: float | None = None
    max_tokens: int | None = None
    extras: dict[str, Any] = field(default_factory=dict)


class BaseAdapter(ABC):
    """Abstract base class for all external model adapters."""

    @abstractmethod
    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        """Send a single turn to the model and return the result.

        Args:
            messages: Messages to send (system and user roles).
            tools: Optional tool definitions with name, description, parameters.
            config: Optional adapter configuration for this turn.

        Returns:
            AdapterTurnResult with the model's response.
        """
        ...

    def provider_name(self) -> str:
        """Return the provider name for this adapter.

        Default implementation returns the class name.
        """
        return type(self).__name__
