"""Scoring agents and the strategy registry.

Maps configured strategy names to agent builders so the orchestrator
never branches on strategy type.
"""

from __future__ import annotations

from collections.abc import Callable

from imgscore.agents.base import ModelBackedAgent, ScoringAgent
from imgscore.agents.expression import HeuristicExpressionAgent, ModelExpressionAgent
from imgscore.agents.size import SizeAgent
from imgscore.agents.subject import LexicalSubjectAgent, ModelSubjectAgent
from imgscore.assessment.assessor import Assessor
from imgscore.storage.images import ImageMetadataReader

AgentBuilder = Callable[[ImageMetadataReader, Assessor | None], ScoringAgent]


def _require(assessor: Assessor | None, strategy: str) -> Assessor:
    if assessor is None:
        raise ValueError(f"Strategy {strategy!r} requires an external assessor")
    return assessor


SUBJECT_STRATEGIES: dict[str, AgentBuilder] = {
    "lexical": lambda reader, assessor: LexicalSubjectAgent(),
    "model": lambda reader, assessor: ModelSubjectAgent(
        _require(assessor, "model"), reader=reader
    ),
}

EXPRESSION_STRATEGIES: dict[str, AgentBuilder] = {
    "heuristic": lambda reader, assessor: HeuristicExpressionAgent(),
    "model": lambda reader, assessor: ModelExpressionAgent(_require(assessor, "model")),
}


def _build(
    registry: dict[str, AgentBuilder],
    kind: str,
    strategy: str,
    reader: ImageMetadataReader,
    assessor: Assessor | None,
) -> ScoringAgent:
    builder = registry.get(strategy)
    if builder is None:
        available = sorted(registry.keys())
        raise ValueError(
            f"Unknown {kind} strategy {strategy!r}. Available strategies: {available}"
        )
    return builder(reader, assessor)


def get_subject_agent(
    strategy: str,
    reader: ImageMetadataReader,
    assessor: Assessor | None = None,
) -> ScoringAgent:
    """Instantiate the subject agent for a configured strategy.

    Raises:
        ValueError: For unknown strategies, or a model strategy without assessor.
    """
    return _build(SUBJECT_STRATEGIES, "subject", strategy, reader, assessor)


def get_expression_agent(
    strategy: str,
    reader: ImageMetadataReader,
    assessor: Assessor | None = None,
) -> ScoringAgent:
    """Instantiate the creativity/mood agent for a configured strategy.

    Raises:
        ValueError: For unknown strategies, or a model strategy without assessor.
    """
    return _build(EXPRESSION_STRATEGIES, "expression", strategy, reader, assessor)


__all__ = [
    "EXPRESSION_STRATEGIES",
    "HeuristicExpressionAgent",
    "LexicalSubjectAgent",
    "ModelBackedAgent",
    "ModelExpressionAgent",
    "ModelSubjectAgent",
    "SUBJECT_STRATEGIES",
    "ScoringAgent",
    "SizeAgent",
    "get_expression_agent",
    "get_subject_agent",
]
