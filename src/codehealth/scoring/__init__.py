"""Score aggregation, grading and CI threshold decisions."""

from .aggregator import GRADE_BANDS, SCORE_WEIGHTS, aggregate, grade_for
from .models import ComponentScores, HealthMetrics, HealthScore, NotComputed
from .threshold import ThresholdResult, check_threshold

__all__ = [
    "ComponentScores",
    "HealthMetrics",
    "HealthScore",
    "NotComputed",
    "GRADE_BANDS",
    "SCORE_WEIGHTS",
    "aggregate",
    "grade_for",
    "ThresholdResult",
    "check_threshold",
]
