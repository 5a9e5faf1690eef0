"""Creativity and mood agents: heuristic and external model.

The heuristic mood value is a deliberately non-deterministic
placeholder drawn from [60, 100]; only its range is meaningful.
"""

from __future__ import annotations

import random

import structlog

from imgscore.agents.base import ModelBackedAgent, ScoringAgent
from imgscore.assessment.assessor import Assessor
from imgscore.assessment.interpreter import interpret_score
from imgscore.assessment.prompt import EXPRESSION_TOOL, build_expression_messages
from imgscore.models.artifact import Artifact
from imgscore.models.record import AgentScore
from imgscore.pipeline.aggregation import clamp_score

logger = structlog.get_logger()

CREATIVITY_KEY = "creativityScore"
CREATIVITY_ALIASES = ("creativity_score", "creativity")
MOOD_KEY = "moodScore"
MOOD_ALIASES = ("mood_score", "mood")

CREATIVITY_DEFAULT = 60
MOOD_DEFAULT = 60

MOOD_RANGE = (60, 100)

# Prompts of this many words or more earn full creativity marks
CREATIVITY_FULL_WORDS = 15


def creativity_score(prompt: str) -> int:
    """Longer prompts score higher, capped at 100."""
    word_count = len(prompt.split())
    return clamp_score(min(100.0, word_count / CREATIVITY_FULL_WORDS * 100))


class HeuristicExpressionAgent(ScoringAgent):
    """Prompt-length creativity plus a random placeholder mood."""

    name = "expression"
    defaults = {"creativity": CREATIVITY_DEFAULT, "mood": MOOD_DEFAULT}

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def score(self, artifact: Artifact) -> list[AgentScore]:
        low, high = MOOD_RANGE
        return [
            AgentScore(name="creativity", value=creativity_score(artifact.prompt)),
            AgentScore(name="mood", value=self._rng.randint(low, high)),
        ]


class ModelExpressionAgent(ModelBackedAgent):
    """Asks an external model for creativity and mood in one request.

    Each value is interpreted independently; missing or unparseable
    values and adapter failures fall back to 60.
    """

    name = "expression"
    defaults = {"creativity": CREATIVITY_DEFAULT, "mood": MOOD_DEFAULT}

    def __init__(self, assessor: Assessor) -> None:
        self._assessor = assessor

    async def score_async(self, artifact: Artifact) -> list[AgentScore]:
        messages = build_expression_messages(artifact.prompt)

        try:
            result = await self._assessor.request_score(EXPRESSION_TOOL, messages)
        except Exception as exc:
            logger.warning(
                "expression_agent_assessor_failed",
                artifact_id=artifact.id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return self.fallback_scores()

        creativity = interpret_score(
            result,
            CREATIVITY_KEY,
            aliases=CREATIVITY_ALIASES,
            other_keys=(MOOD_KEY, *MOOD_ALIASES),
            default=CREATIVITY_DEFAULT,
        )
        mood = interpret_score(
            result,
            MOOD_KEY,
            aliases=MOOD_ALIASES,
            other_keys=(CREATIVITY_KEY, *CREATIVITY_ALIASES),
            default=MOOD_DEFAULT,
        )
        logger.debug(
            "expression_agent_scored",
            artifact_id=artifact.id,
            creativity=creativity.value,
            creativity_source=creativity.source,
            mood=mood.value,
            mood_source=mood.source,
        )
        return [
            AgentScore(name="creativity", value=creativity.value),
            AgentScore(name="mood", value=mood.value),
        ]
