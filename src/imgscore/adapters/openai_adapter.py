"""OpenAI adapter for model-backed scoring agents.

Converts unified Messages (with optional image attachments) and tool
definitions to the OpenAI chat completion format.
"""

from __future__ import annotations

import json
from typing import Any

from imgscore.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    Message,
    TokenUsage,
    ToolCallResult,
)


class OpenAIAdapter(BaseAdapter):
    """Adapter for the OpenAI chat completion API.

    Uses a lazily created AsyncOpenAI client that reads OPENAI_API_KEY
    from the environment.
    """

    def __init__(self) -> None:
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI()
        return self._client

    def _convert_message(self, msg: Message) -> dict[str, Any]:
        """Convert one Message; images become image_url content parts."""
        if not msg.images:
            return {"role": msg.role, "content": msg.content}

        parts: list[dict[str, Any]] = []
        if msg.content:
            parts.append({"type": "text", "text": msg.content})
        for image in msg.images:
            parts.append(
                {"type": "image_url", "image_url": {"url": image.to_data_url()}}
            )
        return {"role": msg.role, "content": parts}

    def _convert_tools(
        self, tools: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool["name"],
                    "description": tool.get("description", ""),
                    "parameters": tool.get("parameters", {}),
                },
            }
            for tool in tools
        ]

    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        config = config or AdapterConfig(model="gpt-4o-mini")
        client = self._get_client()

        kwargs: dict[str, Any] = {
            "model": config.model,
            "messages": [self._convert_message(m) for m in messages],
        }

        if tools:
            kwargs["tools"] = self._convert_tools(tools)

        if config.temperature is not None:
            kwargs["temperature"] = config.temperature

        if config.max_tokens is not None:
            kwargs["max_tokens"] = config.max_tokens

        kwargs.update(config.extras)

        response = await client.chat.completions.create(**kwargs)

        choice = response.choices[0]

        tool_calls: list[ToolCallResult] = []
        for tc in choice.message.tool_calls or []:
            try:
                arguments = json.loads(tc.function.arguments)
            except (json.JSONDecodeError, TypeError):
                # Leave malformed arguments for the interpreter's text fallback
                arguments = {}
            if not isinstance(arguments, dict):
                arguments = {}
            tool_calls.append(
                ToolCallResult(id=tc.id, name=tc.function.name, arguments=arguments)
            )

        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return AdapterTurnResult(
            content=choice.message.content,
            tool_calls=tool_calls,
            usage=usage,
            raw_response=response.model_dump(),
            finish_reason=choice.finish_reason,
        )

    def provider_name(self) -> str:
        return "openai"
