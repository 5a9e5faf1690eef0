"""EvaluationPipeline: evaluate one artifact end to end.

Flow: validate id -> load artifact -> run agents concurrently ->
aggregate -> persist. Agents run as tasks in one TaskGroup, so
aggregation only starts once every agent has produced its scores (or
its fallback). Store reads and writes run on worker threads. Nothing is
persisted until all scoring is done, so a cancelled or failed
invocation never leaves a partial record.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog

from imgscore.agents.base import ScoringAgent
from imgscore.errors import ArtifactNotFound, MalformedInput
from imgscore.models.artifact import Artifact
from imgscore.models.record import AgentScore, EvaluationOutcome
from imgscore.pipeline.recorder import EvaluationRecorder
from imgscore.storage.json_store import ArtifactStore

logger = structlog.get_logger()

REQUIRED_SCORES = ("size", "subject", "creativity", "mood")


def validate_artifact_id(artifact_id: Any) -> str:
    """Normalize a request's artifact identifier.

    Accepts non-empty strings and integers (not booleans).

    Raises:
        MalformedInput: For missing, blank, or wrongly typed identifiers.
    """
    if isinstance(artifact_id, bool) or artifact_id is None:
        raise MalformedInput("artifact_id is required")
    if isinstance(artifact_id, int):
        return str(artifact_id)
    if not isinstance(artifact_id, str):
        raise MalformedInput(
            f"artifact_id must be a string or integer, got {type(artifact_id).__name__}"
        )
    normalized = artifact_id.strip()
    if not normalized:
        raise MalformedInput("artifact_id must not be empty")
    return normalized


class EvaluationPipeline:
    """Runs the scoring agents for one artifact and records the result."""

    def __init__(
        self,
        artifacts: ArtifactStore,
        agents: Sequence[ScoringAgent],
        recorder: EvaluationRecorder,
    ) -> None:
        provided = [name for agent in agents for name in agent.score_names]
        missing = [name for name in REQUIRED_SCORES if name not in provided]
        if missing:
            raise ValueError(f"No agent provides score(s): {', '.join(missing)}")
        self._artifacts = artifacts
        self._agents = list(agents)
        self._recorder = recorder

    async def evaluate(self, artifact_id: Any) -> EvaluationOutcome:
        """Evaluate one artifact and persist the record.

        Raises:
            MalformedInput: Invalid identifier; no agent was run.
            ArtifactNotFound: Unknown identifier; nothing was written.
            PersistenceFailure: The record could not be saved.
        """
        artifact_id = validate_artifact_id(artifact_id)
        log = logger.bind(artifact_id=artifact_id)

        artifact = await asyncio.to_thread(self._artifacts.find_by_id, artifact_id)
        if artifact is None:
            log.info("evaluation_artifact_not_found")
            raise ArtifactNotFound(artifact_id)

        log.info("evaluation_started", agents=[a.name for a in self._agents])
        scores = await self._run_agents(artifact)

        outcome = await asyncio.to_thread(
            self._recorder.record,
            artifact_id,
            size=scores["size"],
            subject=scores["subject"],
            creativity=scores["creativity"],
            mood=scores["mood"],
        )
        log.info(
            "evaluation_completed",
            record_id=outcome.record_id,
            composite=outcome.composite_score,
            cache_updated=outcome.cache_updated,
        )
        return outcome

    def evaluate_sync(self, artifact_id: Any) -> EvaluationOutcome:
        """Blocking wrapper around evaluate() for non-async callers."""
        return asyncio.run(self.evaluate(artifact_id))

    async def _run_agents(self, artifact: Artifact) -> dict[str, int]:
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(self._run_agent(agent, artifact))
                for agent in self._agents
            ]

        scores: dict[str, int] = {}
        for task in tasks:
            for agent_score in task.result():
                scores[agent_score.name] = agent_score.value
        return scores

    async def _run_agent(
        self, agent: ScoringAgent, artifact: Artifact
    ) -> list[AgentScore]:
        """Run one agent; any unexpected error becomes its fallback scores."""
        try:
            results = await agent.score_async(artifact)
        except Exception:
            logger.exception(
                "agent_failed_unexpectedly",
                artifact_id=artifact.id,
                agent=agent.name,
            )
            return agent.fallback_scores()

        produced = {s.name for s in results}
        missing = [s for s in agent.fallback_scores() if s.name not in produced]
        if missing:
            logger.warning(
                "agent_scores_missing",
                artifact_id=artifact.id,
                agent=agent.name,
                missing=[s.name for s in missing],
            )
        return [*results, *missing]
