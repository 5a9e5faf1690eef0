"""Artifact model: one generated image plus the prompt that produced it.

Artifacts are owned by the artifact store. The evaluation pipeline only
reads them and rewrites the advisory ``cached_score`` field.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel, field_validator


class Artifact(BaseModel):
    """A generated image and its originating prompt text."""

    id: str
    prompt: str
    image_path: str
    user_id: str | None = None
    brand_id: str | None = None
    llm_model: str | None = None
    channel: str | None = None
    timestamp: datetime | None = None
    cached_score: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Imported rows often carry integer primary keys
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("cached_score", mode="before")
    @classmethod
    def _blank_score_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def image_name(self) -> str:
        """Base file name of the image reference."""
        return PurePosixPath(self.image_path.replace("\\", "/")).name
