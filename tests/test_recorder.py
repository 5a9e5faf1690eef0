"""Tests for EvaluationRecorder - append record, then refresh cache."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from imgscore.errors import PersistenceFailure
from imgscore.models.artifact import Artifact
from imgscore.pipeline.recorder import EvaluationRecorder
from imgscore.storage.json_store import StoreError

FIXED_NOW = datetime(2026, 5, 4, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def recorder(artifact_store, evaluation_store) -> EvaluationRecorder:
    artifact_store.save_artifact(Artifact(id="42", prompt="red fox", image_path="fox.png"))
    return EvaluationRecorder(artifact_store, evaluation_store, clock=lambda: FIXED_NOW)


class TestRecord:
    def test_appends_record_and_updates_cache(self, recorder, artifact_store, evaluation_store):
        outcome = recorder.record("42", size=100, subject=100, creativity=13, mood=80)

        assert outcome.composite_score == 73
        assert outcome.cache_updated is True
        assert evaluation_store.count_records("42") == 1

        record = evaluation_store.load_record(outcome.record_id)
        assert record.created_at == FIXED_NOW
        assert (record.size_score, record.subject_score) == (100, 100)
        assert (record.creativity_score, record.mood_score) == (13, 80)
        assert artifact_store.find_by_id("42").cached_score == record.composite_score

    def test_each_run_appends_new_record(self, recorder, artifact_store, evaluation_store):
        first = recorder.record("42", size=100, subject=100, creativity=13, mood=80)
        second = recorder.record("42", size=25, subject=0, creativity=20, mood=60)

        assert first.record_id != second.record_id
        assert evaluation_store.count_records("42") == 2
        assert evaluation_store.load_record(first.record_id).composite_score == 73
        # Cache reflects the most recent evaluation
        assert artifact_store.find_by_id("42").cached_score == 26

    def test_append_failure_leaves_cache_untouched(self, recorder, artifact_store, evaluation_store):
        with patch.object(evaluation_store, "append", side_effect=StoreError("disk full")):
            with pytest.raises(PersistenceFailure) as exc_info:
                recorder.record("42", size=100, subject=100, creativity=13, mood=80)

        exc = exc_info.value
        assert exc.code == "persistence_failed"
        assert exc.scores["composite_score"] == 73
        assert exc.to_dict()["saved"] is False
        assert artifact_store.find_by_id("42").cached_score is None
        assert evaluation_store.count_records("42") == 0

    def test_cache_failure_keeps_record(self, recorder, artifact_store, evaluation_store):
        with patch.object(artifact_store, "update_cached_score", side_effect=StoreError("locked")):
            outcome = recorder.record("42", size=100, subject=100, creativity=13, mood=80)

        assert outcome.cache_updated is False
        assert evaluation_store.count_records("42") == 1
        assert artifact_store.find_by_id("42").cached_score is None

    def test_cache_failure_when_artifact_deleted(self, recorder, artifact_store, evaluation_store):
        artifact_store._artifact_file("42").unlink()
        outcome = recorder.record("42", size=0, subject=0, creativity=0, mood=60)
        assert outcome.cache_updated is False
        assert outcome.composite_score == 15
        assert evaluation_store.count_records("42") == 1

    def test_cache_failure_when_artifact_unreadable(self, recorder, artifact_store, evaluation_store):
        artifact_store._artifact_file("42").write_text("{corrupt", encoding="utf-8")

        outcome = recorder.record("42", size=100, subject=100, creativity=13, mood=80)

        assert outcome.cache_updated is False
        assert outcome.composite_score == 73
        assert evaluation_store.count_records("42") == 1
