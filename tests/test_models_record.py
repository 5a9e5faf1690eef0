"""Tests for Artifact, AgentScore, EvaluationRecord, and EvaluationOutcome."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from imgscore.models.artifact import Artifact
from imgscore.models.record import AgentScore, EvaluationOutcome, EvaluationRecord

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _record(**overrides) -> EvaluationRecord:
    fields = dict(
        id="r1",
        artifact_id="42",
        size_score=25,
        subject_score=100,
        creativity_score=40,
        mood_score=60,
        composite_score=56,
        created_at=NOW,
    )
    fields.update(overrides)
    return EvaluationRecord(**fields)


class TestArtifact:
    def test_integer_id_becomes_string(self):
        assert Artifact(id=12, prompt="p", image_path="x.png").id == "12"

    def test_blank_cached_score_is_none(self):
        assert Artifact(id="1", prompt="p", image_path="x.png", cached_score="").cached_score is None

    def test_numeric_string_cached_score(self):
        assert Artifact(id="1", prompt="p", image_path="x.png", cached_score="73").cached_score == 73.0

    @pytest.mark.parametrize(
        ("image_path", "expected"),
        [
            ("/images/red_fox.png", "red_fox.png"),
            ("red_fox.png", "red_fox.png"),
            ("uploads\\2024\\fox.jpg", "fox.jpg"),
        ],
    )
    def test_image_name(self, image_path, expected):
        assert Artifact(id="1", prompt="p", image_path=image_path).image_name == expected


class TestAgentScore:
    def test_bounds(self):
        with pytest.raises(ValidationError):
            AgentScore(name="size", value=101)
        with pytest.raises(ValidationError):
            AgentScore(name="size", value=-1)

    def test_frozen(self):
        score = AgentScore(name="mood", value=70)
        with pytest.raises(ValidationError):
            score.value = 10


class TestEvaluationRecord:
    def test_valid(self):
        # (25 + 100 + 40 + 60) / 4 = 56.25
        assert _record().composite_score == 56

    def test_composite_must_match(self):
        with pytest.raises(ValidationError, match="does not match"):
            _record(composite_score=57)

    def test_sub_score_out_of_range(self):
        with pytest.raises(ValidationError):
            _record(size_score=120)

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError):
            _record(notes="hi")

    def test_json_round_trip_revalidates(self):
        record = _record()
        assert EvaluationRecord.model_validate_json(record.model_dump_json()) == record


class TestEvaluationOutcome:
    def test_from_record(self):
        outcome = EvaluationOutcome.from_record(_record(), cache_updated=False)
        assert outcome.record_id == "r1"
        assert outcome.composite_score == 56
        assert outcome.cache_updated is False
        assert isinstance(outcome.size_score, int)
