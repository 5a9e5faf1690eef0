"""Tests for the BaseAdapter ABC and adapter dataclasses."""

from __future__ import annotations

import pytest

from imgscore.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    Message,
    TokenUsage,
)


class TestBaseAdapter:
    def test_cannot_instantiate(self) -> None:
        with pytest.raises(TypeError):
            BaseAdapter()  # type: ignore[abstract]

    def test_provider_name_defaults_to_class_name(self) -> None:
        class LocalVisionAdapter(BaseAdapter):
            async def send_turn(self, messages, tools=None, config=None):
                return AdapterTurnResult(
                    content=None,
                    tool_calls=[],
                    usage=TokenUsage(),
                    raw_response={},
                    finish_reason=None,
                )

        assert LocalVisionAdapter().provider_name() == "LocalVisionAdapter"


class TestDataclasses:
    def test_token_usage_defaults(self) -> None:
        usage = TokenUsage()
        assert (usage.input_tokens, usage.output_tokens, usage.total_tokens) == (0, 0, 0)

    def test_message_images_default_empty(self) -> None:
        first = Message(role="user", content="a")
        second = Message(role="user", content="b")
        first.images.append(object())  # type: ignore[arg-type]
        assert second.images == []

    def test_adapter_config_defaults(self) -> None:
        config = AdapterConfig(model="gpt-4o-mini")
        assert config.temperature is None
        assert config.max_tokens is None
        assert config.extras == {}
