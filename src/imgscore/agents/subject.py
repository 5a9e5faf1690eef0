"""Subject adherence agents: lexical heuristic and external model."""

from __future__ import annotations

import asyncio

import structlog

from imgscore.adapters.base import ImageAttachment
from imgscore.agents.base import ModelBackedAgent, ScoringAgent
from imgscore.assessment.assessor import Assessor
from imgscore.assessment.interpreter import interpret_score
from imgscore.assessment.prompt import SUBJECT_TOOL, build_subject_messages
from imgscore.models.artifact import Artifact
from imgscore.models.record import AgentScore
from imgscore.pipeline.aggregation import clamp_score
from imgscore.storage.images import ImageMetadataReader, ImageReadError

logger = structlog.get_logger()

SUBJECT_KEY = "subjectScore"
SUBJECT_ALIASES = ("subject_score", "subject", "adherence", "score")
SUBJECT_DEFAULT = 50


def lexical_subject_score(prompt: str, image_name: str) -> int:
    """Share of prompt words found in the image file name, doubled and capped.

    Matching is case-insensitive substring matching against the file
    name. An empty prompt scores 0. This is a name-based placeholder
    for real content matching.
    """
    tokens = prompt.lower().split()
    if not tokens:
        return 0
    name = image_name.lower()
    matches = sum(1 for token in tokens if token in name)
    return clamp_score(min(100.0, matches / len(tokens) * 200))


class LexicalSubjectAgent(ScoringAgent):
    """Scores subject adherence by matching prompt words to the file name."""

    name = "subject"
    defaults = {"subject": 0}

    def score(self, artifact: Artifact) -> list[AgentScore]:
        value = lexical_subject_score(artifact.prompt, artifact.image_name)
        return [AgentScore(name="subject", value=value)]


class ModelSubjectAgent(ModelBackedAgent):
    """Asks an external model to rate subject adherence.

    The image is attached when the assessor allows it and it can be
    read. Any adapter failure or timeout yields the neutral default.
    """

    name = "subject"
    defaults = {"subject": SUBJECT_DEFAULT}

    def __init__(
        self,
        assessor: Assessor,
        reader: ImageMetadataReader | None = None,
        default: int = SUBJECT_DEFAULT,
    ) -> None:
        self._assessor = assessor
        self._reader = reader
        self.defaults = {"subject": default}

    async def _load_image(self, artifact: Artifact) -> ImageAttachment | None:
        if self._reader is None or not self._assessor.include_image:
            return None
        try:
            data, media_type = await asyncio.to_thread(
                self._reader.read_bytes, artifact.image_path
            )
        except ImageReadError as exc:
            logger.info(
                "subject_agent_image_skipped",
                artifact_id=artifact.id,
                reason=exc.reason,
            )
            return None
        return ImageAttachment(data=data, media_type=media_type)

    async def score_async(self, artifact: Artifact) -> list[AgentScore]:
        default = self.defaults["subject"]
        image = await self._load_image(artifact)
        messages = build_subject_messages(artifact.prompt, artifact.image_name, image)

        try:
            result = await self._assessor.request_score(SUBJECT_TOOL, messages)
        except Exception as exc:
            logger.warning(
                "subject_agent_assessor_failed",
                artifact_id=artifact.id,
                error_type=type(exc).__name__,
                error=str(exc),
                fallback=default,
            )
            return self.fallback_scores()

        extraction = interpret_score(
            result, SUBJECT_KEY, aliases=SUBJECT_ALIASES, default=default
        )
        if extraction.source != "exact_key":
            logger.info(
                "subject_agent_nonconforming_response",
                artifact_id=artifact.id,
                source=extraction.source,
                score=extraction.value,
            )
        return [AgentScore(name="subject", value=extraction.value)]
