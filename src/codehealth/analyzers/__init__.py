"""Content-based analyzers and the danger-zone classifier."""

from .complexity import ComplexityEstimator, ComplexityMetric, complexity_component, complexity_score
from .coverage import CoverageRecord, CoverageState, CoverageSummary, TestCorrelator, summarize_coverage
from .danger import DangerZone, DangerZoneClassifier, danger_score, danger_tier
from .debt import DebtMarker, DebtScanner, MarkerKind, debt_component, marker_counts

__all__ = [
    "ComplexityEstimator",
    "ComplexityMetric",
    "complexity_component",
    "complexity_score",
    "DebtScanner",
    "DebtMarker",
    "MarkerKind",
    "debt_component",
    "marker_counts",
    "TestCorrelator",
    "CoverageRecord",
    "CoverageState",
    "CoverageSummary",
    "summarize_coverage",
    "DangerZoneClassifier",
    "DangerZone",
    "danger_score",
    "danger_tier",
]
