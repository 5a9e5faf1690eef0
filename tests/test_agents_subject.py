"""Tests for the lexical and model-backed subject agents."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from imgscore.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    TokenUsage,
    ToolCallResult,
)
from imgscore.agents.subject import (
    LexicalSubjectAgent,
    ModelSubjectAgent,
    lexical_subject_score,
)
from imgscore.assessment.assessor import Assessor
from imgscore.models.artifact import Artifact
from imgscore.storage.images import ImageMetadataReader


def _artifact(prompt: str = "red fox", image_path: str = "/images/red-fox.png") -> Artifact:
    return Artifact(id="7", prompt=prompt, image_path=image_path)


def _tool_result(arguments: dict) -> AdapterTurnResult:
    return AdapterTurnResult(
        content=None,
        tool_calls=[ToolCallResult(id="call_1", name="submit_scores", arguments=arguments)],
        usage=TokenUsage(input_tokens=120, output_tokens=10, total_tokens=130),
        raw_response={},
        finish_reason="tool_calls",
    )


def _text_result(content: str) -> AdapterTurnResult:
    return AdapterTurnResult(
        content=content,
        tool_calls=[],
        usage=TokenUsage(),
        raw_response={},
        finish_reason="stop",
    )


def _assessor(send_turn: AsyncMock, timeout: float = 5.0, include_image: bool = True) -> Assessor:
    adapter = MagicMock()
    adapter.provider_name.return_value = "openai"
    adapter.send_turn = send_turn
    return Assessor(
        adapter,
        AdapterConfig(model="gpt-4o-mini"),
        timeout_seconds=timeout,
        max_retries=0,
        include_image=include_image,
    )


class TestLexicalSubjectScore:
    def test_partial_match_is_doubled_and_capped(self):
        # 2 of 3 tokens match -> 133 -> 100
        assert lexical_subject_score("red fox jumping", "red_fox_forest.png") == 100

    def test_quarter_match(self):
        assert lexical_subject_score("red whale ocean swimming", "red_fox.png") == 50

    def test_no_match(self):
        assert lexical_subject_score("blue whale", "red_fox.png") == 0

    def test_case_insensitive(self):
        assert lexical_subject_score("RED Fox", "red-fox.png") == 100

    def test_empty_prompt(self):
        assert lexical_subject_score("", "red_fox.png") == 0

    def test_whitespace_prompt(self):
        assert lexical_subject_score("   \n ", "red_fox.png") == 0


class TestLexicalSubjectAgent:
    def test_uses_base_file_name(self):
        agent = LexicalSubjectAgent()
        # "images" only appears in the directory, not the file name
        [score] = agent.score(_artifact(prompt="images", image_path="/images/fox.png"))
        assert score.name == "subject"
        assert score.value == 0

    def test_scores_match(self):
        [score] = LexicalSubjectAgent().score(_artifact())
        assert score.value == 100


class TestModelSubjectAgent:
    @pytest.mark.asyncio
    async def test_structured_score(self):
        send_turn = AsyncMock(return_value=_tool_result({"subjectScore": 72}))
        agent = ModelSubjectAgent(_assessor(send_turn))
        [score] = await agent.score_async(_artifact())
        assert score.value == 72

    @pytest.mark.asyncio
    async def test_unknown_key(self):
        send_turn = AsyncMock(return_value=_tool_result({"foo": 55}))
        agent = ModelSubjectAgent(_assessor(send_turn))
        assert (await agent.score_async(_artifact()))[0].value == 55

    @pytest.mark.asyncio
    async def test_free_text(self):
        send_turn = AsyncMock(return_value=_text_result("Score: 83/100"))
        agent = ModelSubjectAgent(_assessor(send_turn))
        assert (await agent.score_async(_artifact()))[0].value == 83

    @pytest.mark.asyncio
    async def test_unparseable_text_uses_default(self):
        send_turn = AsyncMock(return_value=_text_result("I cannot judge this image."))
        agent = ModelSubjectAgent(_assessor(send_turn))
        assert (await agent.score_async(_artifact()))[0].value == 50

    @pytest.mark.asyncio
    async def test_adapter_error_uses_default(self):
        send_turn = AsyncMock(side_effect=ValueError("bad request"))
        agent = ModelSubjectAgent(_assessor(send_turn))
        assert (await agent.score_async(_artifact()))[0].value == 50

    @pytest.mark.asyncio
    async def test_timeout_uses_default(self):
        async def _slow(*args, **kwargs):
            await asyncio.sleep(5)

        agent = ModelSubjectAgent(_assessor(AsyncMock(side_effect=_slow), timeout=0.05))
        assert (await agent.score_async(_artifact()))[0].value == 50

    @pytest.mark.asyncio
    async def test_custom_default(self):
        send_turn = AsyncMock(side_effect=RuntimeError("down"))
        agent = ModelSubjectAgent(_assessor(send_turn), default=40)
        assert (await agent.score_async(_artifact()))[0].value == 40

    @pytest.mark.asyncio
    async def test_attaches_image_when_readable(self, image_root, write_image):
        write_image("/images/red-fox.png", (64, 64))
        send_turn = AsyncMock(return_value=_tool_result({"subjectScore": 90}))
        agent = ModelSubjectAgent(_assessor(send_turn), reader=ImageMetadataReader(image_root))

        await agent.score_async(_artifact())

        messages = send_turn.call_args.args[0]
        user = messages[-1]
        assert user.role == "user"
        assert len(user.images) == 1
        assert user.images[0].media_type == "image/png"
        assert "red fox" in user.content

    @pytest.mark.asyncio
    async def test_missing_image_is_skipped(self, image_root):
        send_turn = AsyncMock(return_value=_tool_result({"subjectScore": 30}))
        agent = ModelSubjectAgent(_assessor(send_turn), reader=ImageMetadataReader(image_root))

        [score] = await agent.score_async(_artifact())

        assert score.value == 30
        assert send_turn.call_args.args[0][-1].images == []

    @pytest.mark.asyncio
    async def test_include_image_disabled(self, image_root, write_image):
        write_image("/images/red-fox.png", (64, 64))
        send_turn = AsyncMock(return_value=_tool_result({"subjectScore": 90}))
        agent = ModelSubjectAgent(
            _assessor(send_turn, include_image=False),
            reader=ImageMetadataReader(image_root),
        )

        await agent.score_async(_artifact())

        assert send_turn.call_args.args[0][-1].images == []

    def test_sync_score(self):
        send_turn = AsyncMock(return_value=_tool_result({"subjectScore": 64}))
        agent = ModelSubjectAgent(_assessor(send_turn))
        assert agent.score(_artifact())[0].value == 64

    @pytest.mark.asyncio
    async def test_sync_score_inside_event_loop_raises(self):
        agent = ModelSubjectAgent(_assessor(AsyncMock()))
        with pytest.raises(RuntimeError, match="score_async"):
            agent.score(_artifact())
