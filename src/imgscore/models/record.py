"""Score and evaluation record models.

AgentScore is the unit every scoring agent produces. EvaluationRecord is
the immutable, append-only result of one evaluation, and
EvaluationOutcome is the envelope returned to callers.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from imgscore.pipeline.aggregation import compute_composite


class AgentScore(BaseModel):
    """A named score in [0, 100] produced by exactly one agent."""

    model_config = {"frozen": True}

    name: str
    value: int = Field(ge=0, le=100)


class EvaluationRecord(BaseModel):
    """Persisted result of a single evaluation invocation.

    The composite is always the half-up rounded mean of the four stored
    sub-scores; a record that breaks this cannot be built or loaded.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    artifact_id: str
    size_score: int = Field(ge=0, le=100)
    subject_score: int = Field(ge=0, le=100)
    creativity_score: int = Field(ge=0, le=100)
    mood_score: int = Field(ge=0, le=100)
    composite_score: int = Field(ge=0, le=100)
    created_at: datetime

    @model_validator(mode="after")
    def _composite_matches_sub_scores(self) -> EvaluationRecord:
        expected = compute_composite(
            self.size_score,
            self.subject_score,
            self.creativity_score,
            self.mood_score,
        )
        if self.composite_score != expected:
            raise ValueError(
                f"composite_score {self.composite_score} does not match "
                f"sub-scores (expected {expected})"
            )
        return self


class EvaluationOutcome(BaseModel):
    """Score breakdown returned by a successful evaluation."""

    artifact_id: str
    size_score: int
    subject_score: int
    creativity_score: int
    mood_score: int
    composite_score: int
    record_id: str
    cache_updated: bool = True

    @classmethod
    def from_record(
        cls, record: EvaluationRecord, cache_updated: bool = True
    ) -> EvaluationOutcome:
        return cls(
            artifact_id=record.artifact_id,
            size_score=record.size_score,
            subject_score=record.subject_score,
            creativity_score=record.creativity_score,
            mood_score=record.mood_score,
            composite_score=record.composite_score,
            record_id=record.id,
            cache_updated=cache_updated,
        )
