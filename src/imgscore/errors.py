"""Pipeline-level error taxonomy.

Only these errors ever leave the evaluation pipeline. Agent-level
failures (unreadable images, adapter errors, timeouts) are absorbed by
the agents themselves and replaced with documented fallback scores.
"""

from __future__ import annotations

from typing import Any


class EvaluationError(Exception):
    """Base class for errors surfaced to evaluation callers.

    Attributes:
        code: Stable machine-readable error code.
        status_code: HTTP-equivalent status for request/response surfaces.
        message: Human-readable description.
    """

    code = "evaluation_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class MalformedInput(EvaluationError):
    """The request carried a missing or invalid artifact identifier."""

    code = "malformed_input"
    status_code = 400


class ArtifactNotFound(EvaluationError):
    """The artifact identifier does not resolve to a stored artifact."""

    code = "not_found"
    status_code = 404

    def __init__(self, artifact_id: str) -> None:
        self.artifact_id = artifact_id
        super().__init__(f"Artifact '{artifact_id}' not found")


class PersistenceFailure(EvaluationError):
    """The evaluation record could not be appended to history.

    ``scores`` holds the computed sub-scores and composite for
    diagnostics; they were NOT saved.
    """

    code = "persistence_failed"
    status_code = 500

    def __init__(self, message: str, scores: dict[str, int] | None = None) -> None:
        self.scores = dict(scores or {})
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.scores:
            data["scores"] = self.scores
            data["saved"] = False
        return data
