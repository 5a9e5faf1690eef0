"""ScoringAgent and ModelBackedAgent abstract base classes."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from imgscore.models.artifact import Artifact
from imgscore.models.record import AgentScore


class ScoringAgent(ABC):
    """Abstract base class for scoring agents.

    Each agent receives an Artifact and returns one AgentScore per name
    in ``score_names``. Agents absorb their own failures: when they
    cannot produce a real value they return ``fallback_scores()``.
    """

    #: Short identifier used in logs.
    name: str = "agent"

    #: Score names this agent produces, with their documented fallbacks.
    defaults: dict[str, int] = {}

    @property
    def score_names(self) -> tuple[str, ...]:
        return tuple(self.defaults)

    @abstractmethod
    def score(self, artifact: Artifact) -> list[AgentScore]:
        """Score an artifact.

        Returns:
            One AgentScore per name in ``score_names``.
        """

    async def score_async(self, artifact: Artifact) -> list[AgentScore]:
        """Async scoring. Default delegates to sync score().

        Agents that block on I/O or call external models override this.
        """
        return self.score(artifact)

    def fallback_scores(self) -> list[AgentScore]:
        return [AgentScore(name=n, value=v) for n, v in self.defaults.items()]


class ModelBackedAgent(ScoringAgent):
    """Base for agents that score through an external Assessor.

    Subclasses implement score_async(); the sync entry point runs it on
    a fresh event loop.
    """

    def score(self, artifact: Artifact) -> list[AgentScore]:
        """Sync entry point -- delegates to score_async.

        Raises:
            RuntimeError: If called from inside a running event loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            raise RuntimeError(
                f"{type(self).__name__}.score() called from within an async "
                "context. Use score_async() instead."
            )

        return asyncio.run(self.score_async(artifact))

    @abstractmethod
    async def score_async(self, artifact: Artifact) -> list[AgentScore]:
        """Score an artifact with the external model."""
