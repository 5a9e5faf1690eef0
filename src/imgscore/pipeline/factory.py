"""Build an EvaluationPipeline from project configuration."""

from __future__ import annotations

from pathlib import Path

from imgscore.adapters.base import BaseAdapter
from imgscore.agents import get_expression_agent, get_subject_agent
from imgscore.agents.size import SizeAgent
from imgscore.assessment.assessor import Assessor
from imgscore.models.config import ProjectConfig
from imgscore.pipeline.orchestrator import EvaluationPipeline
from imgscore.pipeline.recorder import EvaluationRecorder
from imgscore.storage.images import ImageMetadataReader
from imgscore.storage.json_store import ArtifactStore, EvaluationStore


def build_pipeline(
    config: ProjectConfig,
    project_root: Path,
    *,
    adapter: BaseAdapter | None = None,
) -> EvaluationPipeline:
    """Wire stores, agents, and recorder according to ``config``.

    The external adapter is only resolved when a ``model`` strategy is
    configured; ``adapter`` overrides name-based resolution.
    """
    image_root = Path(config.image_root)
    if not image_root.is_absolute():
        image_root = project_root / image_root
    reader = ImageMetadataReader(image_root)

    assessor = None
    if config.uses_assessor():
        assessor = Assessor.from_config(config.assessor, adapter=adapter)

    artifacts = ArtifactStore(project_root, config.storage_dir)
    history = EvaluationStore(project_root, config.storage_dir)

    return EvaluationPipeline(
        artifacts=artifacts,
        agents=[
            SizeAgent(reader),
            get_subject_agent(config.agents.subject, reader, assessor),
            get_expression_agent(config.agents.expression, reader, assessor),
        ],
        recorder=EvaluationRecorder(artifacts, history),
    )
