"""Assessor: a bounded, retried scoring request to an external model.

Wraps a BaseAdapter so that every call forces the scoring tool, retries
transient failures, and is cut off after ``timeout_seconds`` in total.
Callers treat every exception from request_score() (timeouts included)
as "no usable answer" and fall back to their documented defaults.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any

from imgscore.adapters.base import AdapterConfig, AdapterTurnResult, BaseAdapter, Message
from imgscore.adapters.registry import get_adapter
from imgscore.assessment.prompt import format_tool_choice
from imgscore.assessment.retry import retry_transient
from imgscore.models.config import AssessorConfig


class Assessor:
    """Issues structured scoring requests through an adapter."""

    def __init__(
        self,
        adapter: BaseAdapter,
        config: AdapterConfig,
        timeout_seconds: float = 30.0,
        max_retries: int = 1,
        include_image: bool = True,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.include_image = include_image

    @classmethod
    def from_config(
        cls,
        assessor_config: AssessorConfig,
        adapter: BaseAdapter | None = None,
    ) -> Assessor:
        """Build an Assessor, resolving the adapter by name unless given."""
        return cls(
            adapter=adapter or get_adapter(assessor_config.adapter),
            config=AdapterConfig(
                model=assessor_config.model,
                temperature=assessor_config.temperature,
                max_tokens=assessor_config.max_tokens,
            ),
            timeout_seconds=assessor_config.timeout_seconds,
            max_retries=assessor_config.max_retries,
            include_image=assessor_config.include_image,
        )

    @property
    def model(self) -> str:
        return self._config.model

    async def request_score(
        self,
        tool: dict[str, Any],
        messages: list[Message],
    ) -> AdapterTurnResult:
        """Send one scoring request and return the raw adapter result.

        Raises:
            TimeoutError: If the call (including retries) exceeds the timeout.
            Exception: Any non-transient adapter error.
        """
        tool_choice = format_tool_choice(self._adapter.provider_name(), tool["name"])
        config = replace(self._config, extras={**self._config.extras, **tool_choice})

        return await asyncio.wait_for(
            retry_transient(
                lambda: self._adapter.send_turn(messages, tools=[tool], config=config),
                max_retries=self.max_retries,
            ),
            timeout=self.timeout_seconds,
        )
