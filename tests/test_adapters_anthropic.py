"""Tests for imgscore.adapters.anthropic_adapter.

Uses unittest.mock for the Anthropic SDK client, so tests run without
API keys or network access.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from imgscore.adapters.anthropic_adapter import AnthropicAdapter
from imgscore.adapters.base import AdapterConfig, ImageAttachment, Message
from imgscore.assessment.prompt import EXPRESSION_TOOL


def _block(block_type: str, **fields) -> MagicMock:
    block = MagicMock()
    block.type = block_type
    for name, value in fields.items():
        setattr(block, name, value)
    return block


def _mock_response(blocks: list, stop_reason: str = "tool_use") -> MagicMock:
    response = MagicMock()
    response.content = blocks
    response.stop_reason = stop_reason
    response.usage.input_tokens = 400
    response.usage.output_tokens = 20
    response.model_dump.return_value = {"id": "msg_1"}
    return response


def _adapter_with(response: MagicMock) -> tuple[AnthropicAdapter, AsyncMock]:
    adapter = AnthropicAdapter()
    create = AsyncMock(return_value=response)
    client = MagicMock()
    client.messages.create = create
    adapter._client = client
    return adapter, create


class TestConvert:
    def test_extract_system(self):
        system, remaining = AnthropicAdapter()._extract_system(
            [Message(role="system", content="Be strict."), Message(role="user", content="Rate")]
        )
        assert system == "Be strict."
        assert [m.role for m in remaining] == ["user"]

    def test_image_block_precedes_text(self):
        msg = Message(
            role="user",
            content="Rate this",
            images=[ImageAttachment(data=b"abc", media_type="image/jpeg")],
        )
        converted = AnthropicAdapter()._convert_message(msg)
        assert converted["content"][0] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/jpeg", "data": "YWJj"},
        }
        assert converted["content"][1] == {"type": "text", "text": "Rate this"}

    def test_tools_use_input_schema(self):
        [tool] = AnthropicAdapter()._convert_tools([EXPRESSION_TOOL])
        assert tool["name"] == "submit_scores"
        assert set(tool["input_schema"]["properties"]) == {"creativityScore", "moodScore"}


class TestSendTurn:
    @pytest.mark.asyncio
    async def test_tool_use_block(self):
        adapter, create = _adapter_with(
            _mock_response(
                [_block("tool_use", id="toolu_1", name="submit_scores",
                        input={"creativityScore": 80, "moodScore": 65})]
            )
        )
        result = await adapter.send_turn(
            [Message(role="system", content="sys"), Message(role="user", content="Rate")],
            tools=[EXPRESSION_TOOL],
            config=AdapterConfig(model="claude-haiku", max_tokens=300),
        )
        assert result.tool_calls[0].arguments == {"creativityScore": 80, "moodScore": 65}
        assert result.finish_reason == "tool_use"
        assert result.usage.total_tokens == 420

        kwargs = create.call_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["max_tokens"] == 300
        assert [m["role"] for m in kwargs["messages"]] == ["user"]

    @pytest.mark.asyncio
    async def test_text_blocks_joined(self):
        adapter, _ = _adapter_with(
            _mock_response(
                [_block("text", text="Creativity: 70"), _block("text", text="Mood: 90")],
                stop_reason="end_turn",
            )
        )
        result = await adapter.send_turn([Message(role="user", content="Rate")])
        assert result.content == "Creativity: 70\nMood: 90"
        assert result.tool_calls == []

    @pytest.mark.asyncio
    async def test_default_max_tokens(self):
        adapter, create = _adapter_with(_mock_response([], stop_reason="end_turn"))
        await adapter.send_turn([Message(role="user", content="Rate")])
        assert create.call_args.kwargs["max_tokens"] == 1024
        assert "system" not in create.call_args.kwargs
