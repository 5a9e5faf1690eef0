"""Tests for imgscore.pipeline.aggregation - rounding, clamping, composite."""

from __future__ import annotations

import math

import pytest

from imgscore.pipeline.aggregation import clamp_score, compute_composite, round_half_up


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, 3), (3.5, 4), (2.49, 2), (0.5, 1), (73.25, 73), (99.5, 100)],
    )
    def test_ties_round_up(self, value, expected):
        assert round_half_up(value) == expected


class TestClampScore:
    def test_in_range_is_rounded(self):
        assert clamp_score(24.6) == 25

    def test_above_range_saturates(self):
        assert clamp_score(133.3) == 100

    def test_negative_is_zero(self):
        assert clamp_score(-12) == 0

    def test_nan_is_zero(self):
        assert clamp_score(math.nan) == 0

    def test_infinities_saturate(self):
        assert clamp_score(math.inf) == 100
        assert clamp_score(-math.inf) == 0


class TestComputeComposite:
    def test_mean_of_four(self):
        assert compute_composite(100, 100, 13, 80) == 73

    def test_tie_rounds_up(self):
        # (100 + 100 + 100 + 90) / 4 = 97.5
        assert compute_composite(100, 100, 100, 90) == 98

    def test_all_zero(self):
        assert compute_composite(0, 0, 0, 0) == 0

    def test_all_max(self):
        assert compute_composite(100, 100, 100, 100) == 100

    def test_is_pure(self):
        assert compute_composite(25, 100, 40, 60) == compute_composite(25, 100, 40, 60)
