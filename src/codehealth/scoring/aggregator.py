"""Weighted aggregation of component scores into the final score and grade.

Weights are fixed: the score has to mean the same thing in every
repository and every CI run, so it is not tunable per project.
"""

from __future__ import annotations

import numpy as np

from .models import ComponentScores, HealthMetrics, HealthScore

SCORE_WEIGHTS = {
    "churn": 0.30,
    "complexity": 0.30,
    "debt": 0.20,
    "freshness": 0.20,
}

# (lower bound, grade), checked top-down; bands are closed and exhaustive.
GRADE_BANDS = (
    (90.0, "A"),
    (75.0, "B"),
    (60.0, "C"),
    (40.0, "D"),
    (0.0, "F"),
)


def grade_for(score: float) -> str:
    """Letter grade for a score in [0, 100]."""
    for lower, grade in GRADE_BANDS:
        if score >= lower:
            return grade
    return "F"


def weighted_score(components: ComponentScores) -> float:
    """Weighted sum of the clamped components, clamped and rounded to 0.1."""
    values = np.clip(
        np.array([getattr(components, name) for name in SCORE_WEIGHTS], dtype=float),
        0.0,
        100.0,
    )
    weights = np.array(list(SCORE_WEIGHTS.values()))
    total = float(np.clip(values @ weights, 0.0, 100.0))
    return round(total, 1)


def aggregate(
    components: ComponentScores,
    metrics: HealthMetrics | None = None,
    timestamp: str = "",
) -> HealthScore:
    """Build the HealthScore. Pure: same inputs always give the same output."""
    score = weighted_score(components)
    return HealthScore(
        score=score,
        grade=grade_for(score),
        components=ComponentScores(
            churn=round(components.churn, 1),
            complexity=round(components.complexity, 1),
            debt=round(components.debt, 1),
            freshness=round(components.freshness, 1),
        ),
        metrics=metrics or HealthMetrics(),
        timestamp=timestamp,
    )
