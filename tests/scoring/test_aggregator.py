"""Tests for weighted aggregation and grading."""

import pytest

from codehealth.scoring.aggregator import (
    GRADE_BANDS,
    SCORE_WEIGHTS,
    aggregate,
    grade_for,
    weighted_score,
)
from codehealth.scoring.models import ComponentScores, HealthMetrics, NotComputed


class TestWeights:
    def test_weights_sum_to_one(self):
        assert sum(SCORE_WEIGHTS.values()) == pytest.approx(1.0)

    def test_weighted_sum(self):
        components = ComponentScores(churn=80, complexity=60, debt=100, freshness=50)
        # 0.3*80 + 0.3*60 + 0.2*100 + 0.2*50
        assert weighted_score(components) == 72.0

    def test_all_healthy(self):
        assert weighted_score(ComponentScores(100, 100, 100, 100)) == 100.0

    def test_out_of_range_components_clamped(self):
        assert weighted_score(ComponentScores(150, 100, 100, 100)) == 100.0
        assert weighted_score(ComponentScores(-20, 0, 0, 0)) == 0.0

    def test_rounded_to_one_decimal(self):
        assert weighted_score(ComponentScores(33.333, 33.333, 33.333, 33.333)) == 33.3


class TestGrades:
    @pytest.mark.parametrize(
        "score,grade",
        [
            (100.0, "A"),
            (90.0, "A"),
            (89.9, "B"),
            (75.0, "B"),
            (74.9, "C"),
            (60.0, "C"),
            (59.9, "D"),
            (40.0, "D"),
            (39.9, "F"),
            (0.0, "F"),
        ],
    )
    def test_band_edges(self, score, grade):
        assert grade_for(score) == grade

    def test_bands_exhaustive(self):
        """Every score from 0 to 100 in 0.1 steps has exactly one grade."""
        for tenth in range(0, 1001):
            assert grade_for(tenth / 10) in {g for _, g in GRADE_BANDS}


class TestAggregate:
    def test_pure(self):
        components = ComponentScores(churn=71.234, complexity=55.5, debt=90, freshness=40)
        metrics = HealthMetrics(total_files=3)
        first = aggregate(components, metrics, "2024-06-01T00:00:00Z")
        second = aggregate(components, metrics, "2024-06-01T00:00:00Z")
        assert first == second
        assert first.components.churn == 71.2
        assert first.metrics.total_files == 3

    def test_grade_matches_rounded_score(self):
        """89.96 rounds to 90.0 and therefore grades A."""
        health = aggregate(ComponentScores(89.96, 89.96, 89.96, 89.96))
        assert health.score == 90.0
        assert health.grade == "A"


class TestNotComputed:
    def test_falsy_with_reason(self):
        marker = NotComputed("ownership analysis skipped")
        assert not marker
        assert marker.reason == "ownership analysis skipped"

    def test_marker_count(self):
        metrics = HealthMetrics(todo_count=2, fixme_count=1, hack_count=1, xxx_count=3)
        assert metrics.marker_count == 7
