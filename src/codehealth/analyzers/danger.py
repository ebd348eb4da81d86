"""Danger-zone classification: files that are both churning and complex.

The combined score is the geometric mean of the two axes, so a file at
100 churn / 0 complexity scores 0 while 70 / 70 scores 70. Files that do
not clear the floor on both axes are never listed, whatever their score.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..temporal.churn import ChurnMetric
from .complexity import ComplexityMetric

# Axis lead (in score points) that makes one axis "dominant"
DOMINANCE_MARGIN = 15.0

ACTIONS = {
    "churn": "Stabilize: add tests around this file and slow the rate of change before refactoring",
    "complexity": "Refactor: split the largest functions and flatten deep nesting",
    "both": "Prioritize: cover with tests, then break this file into smaller units",
}


@dataclass(frozen=True)
class DangerZone:
    path: str
    churn_score: float
    complexity_score: float
    change_count: int
    danger_score: float
    tier: str  # "critical", "high" or "medium"
    action: str
    reason: str


def danger_score(churn: float, complexity: float) -> float:
    """Geometric mean of the two axes, in [0, 100]."""
    return round(math.sqrt(max(churn, 0.0) * max(complexity, 0.0)), 1)


def danger_tier(score: float, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> str:
    if score >= thresholds.danger_critical:
        return "critical"
    if score >= thresholds.danger_high:
        return "high"
    return "medium"


def dominant_axis(churn: float, complexity: float) -> str:
    if churn - complexity > DOMINANCE_MARGIN:
        return "churn"
    if complexity - churn > DOMINANCE_MARGIN:
        return "complexity"
    return "both"


class DangerZoneClassifier:
    """Combine churn and complexity metrics into a ranked danger list."""

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS, churn_days: int = 14):
        self.thresholds = thresholds
        self.churn_days = churn_days

    def is_elevated(self, churn: float, complexity: float) -> bool:
        floor = self.thresholds.danger_floor
        return churn > floor and complexity > floor

    def classify(
        self,
        churn: dict[str, ChurnMetric],
        complexity: dict[str, ComplexityMetric],
    ) -> list[DangerZone]:
        """Danger zones ordered by score (highest first), then path."""
        zones: list[DangerZone] = []
        for path, cx in complexity.items():
            ch = churn.get(path)
            if ch is None or not self.is_elevated(ch.score, cx.score):
                continue
            score = danger_score(ch.score, cx.score)
            zones.append(
                DangerZone(
                    path=path,
                    churn_score=ch.score,
                    complexity_score=cx.score,
                    change_count=ch.change_count,
                    danger_score=score,
                    tier=danger_tier(score, self.thresholds),
                    action=ACTIONS[dominant_axis(ch.score, cx.score)],
                    reason=(
                        f"{ch.change_count} changes in {self.churn_days}d, "
                        f"{cx.line_count} lines, longest function {cx.max_function_length} lines"
                    ),
                )
            )
        zones.sort(key=lambda z: (-z.danger_score, z.path))
        return zones
