"""Temporal analysis: git history, churn, freshness and ownership."""

from .cache import GitQueryCache
from .churn import ChurnMetric, Hotspot, analyze_churn, build_hotspots, churn_component
from .freshness import FreshnessRecord, analyze_freshness, freshness_component, staleness_tier
from .git_extractor import GitExtractor
from .models import Commit, GitHistory
from .ownership import BusFactorRisk, OwnershipAnalyzer, OwnershipRecord, OwnershipSummary

__all__ = [
    "Commit",
    "GitHistory",
    "GitExtractor",
    "GitQueryCache",
    "ChurnMetric",
    "Hotspot",
    "analyze_churn",
    "build_hotspots",
    "churn_component",
    "FreshnessRecord",
    "analyze_freshness",
    "freshness_component",
    "staleness_tier",
    "OwnershipAnalyzer",
    "OwnershipRecord",
    "OwnershipSummary",
    "BusFactorRisk",
]
