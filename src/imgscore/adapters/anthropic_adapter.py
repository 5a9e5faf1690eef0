"""Anthropic adapter for model-backed scoring agents.

Converts unified Messages (with optional image attachments) and tool
definitions to the Anthropic messages format.
"""

from __future__ import annotations

from typing import Any

from imgscore.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    Message,
    TokenUsage,
    ToolCallResult,
)


class AnthropicAdapter(BaseAdapter):
    """Adapter for the Anthropic messages API.

    Uses a lazily created AsyncAnthropic client that reads
    ANTHROPIC_API_KEY from the environment.
    """

    def __init__(self) -> None:
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            from anthropic import AsyncAnthropic

            self._client = AsyncAnthropic()
        return self._client

    def _extract_system(
        self, messages: list[Message]
    ) -> tuple[str | None, list[Message]]:
        """Split off the system prompt, which Anthropic takes separately."""
        system_prompt: str | None = None
        remaining: list[Message] = []
        for msg in messages:
            if msg.role == "system":
                system_prompt = msg.content
            else:
                remaining.append(msg)
        return system_prompt, remaining

    def _convert_message(self, msg: Message) -> dict[str, Any]:
        if not msg.images:
            return {"role": msg.role, "content": msg.content}

        # Images first, then the instruction text
        blocks: list[dict[str, Any]] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.to_base64(),
                },
            }
            for image in msg.images
        ]
        if msg.content:
            blocks.append({"type": "text", "text": msg.content})
        return {"role": msg.role, "content": blocks}

    def _convert_tools(
        self, tools: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        return [
            {
                "name": tool["name"],
                "description": tool.get("description", ""),
                "input_schema": tool.get("parameters", {}),
            }
            for tool in tools
        ]

    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        config = config or AdapterConfig(model="claude-sonnet-4-5")
        client = self._get_client()

        system_prompt, remaining = self._extract_system(messages)

        kwargs: dict[str, Any] = {
            "model": config.model,
            "messages": [self._convert_message(m) for m in remaining],
            "max_tokens": config.max_tokens if config.max_tokens is not None else 1024,
        }

        if system_prompt is not None:
            kwargs["system"] = system_prompt

        if tools:
            kwargs["tools"] = self._convert_tools(tools)

        if config.temperature is not None:
            kwargs["temperature"] = config.temperature

        kwargs.update(config.extras)

        response = await client.messages.create(**kwargs)

        content_parts: list[str] = []
        tool_calls: list[ToolCallResult] = []

        for block in response.content:
            if block.type == "text":
                content_parts.append(block.text)
            elif block.type == "tool_use":
                arguments = block.input if isinstance(block.input, dict) else {}
                tool_calls.append(
                    ToolCallResult(id=block.id, name=block.name, arguments=arguments)
                )

        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            total_tokens=response.usage.input_tokens + response.usage.output_tokens,
        )

        return AdapterTurnResult(
            content="\n".join(content_parts) if content_parts else None,
            tool_calls=tool_calls,
            usage=usage,
            raw_response=response.model_dump(),
            finish_reason=response.stop_reason,
        )

    def provider_name(self) -> str:
        return "anthropic"
