"""
codehealth - Repeatable Codebase Health Scoring

Derives a single 0-100 health score from git history and file contents:
churn, structural complexity, technical-debt markers and staleness, plus
danger zones, bus-factor risk and test-file correlation for CI gating.
"""

__version__ = "0.3.0"

from .config import AnalysisConfig, ThresholdConfig, load_config
from .engine import HealthEngine, HealthReport
from .scoring.models import ComponentScores, HealthScore

__all__ = [
    "HealthEngine",  # Main entry point
    "HealthReport",
    "HealthScore",
    "ComponentScores",
    "AnalysisConfig",
    "ThresholdConfig",
    "load_config",
]
