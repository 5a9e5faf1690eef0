"""Project configuration model for imgscore.

Captures imgscore.yaml fields with sensible defaults for storage
location, agent strategy selection, the external assessor, and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

CONFIG_FILENAME = "imgscore.yaml"


class ConfigError(Exception):
    """Raised when imgscore.yaml cannot be parsed or validated."""


class AgentsConfig(BaseModel):
    """Strategy selection for the pluggable scoring agents."""

    model_config = {"extra": "forbid"}

    subject: Literal["lexical", "model"] = "lexical"
    expression: Literal["heuristic", "model"] = "heuristic"


class AssessorConfig(BaseModel):
    """Configuration for the external model used by ``model`` strategies.

    Every call is bounded by ``timeout_seconds``; transient failures are
    retried up to ``max_retries`` times within that bound.
    """

    model_config = {"extra": "forbid"}

    adapter: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = 512
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=1, ge=0, le=10)
    include_image: bool = True


class LoggingConfig(BaseModel):
    """Log level and renderer selection."""

    model_config = {"extra": "forbid"}

    level: str = "INFO"
    format: Literal["console", "json"] = "console"


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from imgscore.yaml."""

    model_config = {"extra": "forbid"}

    storage_dir: str = ".imgscore"
    image_root: str = "public"
    agents: AgentsConfig = Field(default_factory=AgentsConfig)
    assessor: AssessorConfig = Field(default_factory=AssessorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def uses_assessor(self) -> bool:
        """True when any agent strategy needs the external model."""
        return self.agents.subject == "model" or self.agents.expression == "model"


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for imgscore.yaml or .imgscore/.

    Returns:
        The first directory containing either marker, or cwd if none does.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists() or (current / ".imgscore").exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from imgscore.yaml. Returns defaults if not found.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
    """
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
    if raw is None:
        return ProjectConfig()
    try:
        return ProjectConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
