"""EvaluationRecorder -- append the record, then refresh the cached score.

The recorder is the only writer of an artifact's cached score. The
record append and the cache write form one logical step: a failed
append leaves the cache untouched, while a failed cache write after a
successful append only leaves the cache stale until the next run.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

import structlog

from imgscore.errors import PersistenceFailure
from imgscore.models.record import EvaluationOutcome, EvaluationRecord
from imgscore.pipeline.aggregation import compute_composite
from imgscore.storage.json_store import ArtifactStore, EvaluationStore, StoreError

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EvaluationRecorder:
    """Persists immutable evaluation records and the advisory cache."""

    def __init__(
        self,
        artifacts: ArtifactStore,
        history: EvaluationStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._artifacts = artifacts
        self._history = history
        self._clock = clock

    def record(
        self,
        artifact_id: str,
        size: int,
        subject: int,
        creativity: int,
        mood: int,
    ) -> EvaluationOutcome:
        """Append a record for the four sub-scores and update the cache.

        Raises:
            PersistenceFailure: If the record cannot be appended. The
                computed scores are attached but were not saved.
        """
        composite = compute_composite(size, subject, creativity, mood)
        scores = {
            "size_score": size,
            "subject_score": subject,
            "creativity_score": creativity,
            "mood_score": mood,
            "composite_score": composite,
        }

        record = EvaluationRecord(
            id=uuid4().hex,
            artifact_id=artifact_id,
            created_at=self._clock(),
            **scores,
        )

        try:
            self._history.append(record)
        except (StoreError, OSError) as exc:
            logger.error(
                "evaluation_record_append_failed",
                artifact_id=artifact_id,
                error=str(exc),
            )
            raise PersistenceFailure(
                f"Could not save evaluation for artifact '{artifact_id}': {exc}",
                scores=scores,
            ) from exc

        cache_updated = True
        try:
            self._artifacts.update_cached_score(artifact_id, composite)
        except (StoreError, OSError) as exc:
            cache_updated = False
            logger.warning(
                "cached_score_update_failed",
                artifact_id=artifact_id,
                record_id=record.id,
                error=str(exc),
            )

        return EvaluationOutcome.from_record(record, cache_updated=cache_updated)
