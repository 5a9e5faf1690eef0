"""SizeAgent -- resolution compliance from image dimensions."""

from __future__ import annotations

import asyncio

import structlog

from imgscore.agents.base import ScoringAgent
from imgscore.models.artifact import Artifact
from imgscore.models.record import AgentScore
from imgscore.pipeline.aggregation import clamp_score
from imgscore.storage.images import ImageMetadataReader, ImageReadError

logger = structlog.get_logger()

MIN_WIDTH = 300
MIN_HEIGHT = 300


def size_score(
    width: float,
    height: float,
    min_width: int = MIN_WIDTH,
    min_height: int = MIN_HEIGHT,
) -> int:
    """Score image dimensions against the minimum resolution.

    Full marks when both sides meet the minimum; otherwise the pixel
    area as a percentage of the minimum area. Zero, negative, or NaN
    dimensions score 0.
    """
    if width >= min_width and height >= min_height:
        return 100
    if not (width > 0 and height > 0):
        return 0
    return clamp_score(width * height / (min_width * min_height) * 100)


class SizeAgent(ScoringAgent):
    """Scores the artifact's image against a minimum resolution.

    Unreadable images (missing file, I/O error, corrupt header) score 0
    instead of failing the evaluation.
    """

    name = "size"
    defaults = {"size": 0}

    def __init__(
        self,
        reader: ImageMetadataReader,
        min_width: int = MIN_WIDTH,
        min_height: int = MIN_HEIGHT,
    ) -> None:
        self._reader = reader
        self.min_width = min_width
        self.min_height = min_height

    def score(self, artifact: Artifact) -> list[AgentScore]:
        try:
            width, height = self._reader.read_dimensions(artifact.image_path)
        except ImageReadError as exc:
            logger.warning(
                "size_agent_image_unreadable",
                artifact_id=artifact.id,
                image_path=artifact.image_path,
                reason=exc.reason,
            )
            return self.fallback_scores()

        value = size_score(width, height, self.min_width, self.min_height)
        logger.debug(
            "size_agent_scored",
            artifact_id=artifact.id,
            width=width,
            height=height,
            score=value,
        )
        return [AgentScore(name="size", value=value)]

    async def score_async(self, artifact: Artifact) -> list[AgentScore]:
        return await asyncio.to_thread(self.score, artifact)
