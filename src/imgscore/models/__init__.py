"""imgscore data models - re-exports all public model classes."""

from imgscore.models.artifact import Artifact
from imgscore.models.config import ProjectConfig
from imgscore.models.record import AgentScore, EvaluationOutcome, EvaluationRecord

__all__ = [
    "AgentScore",
    "Artifact",
    "EvaluationOutcome",
    "EvaluationRecord",
    "ProjectConfig",
]
