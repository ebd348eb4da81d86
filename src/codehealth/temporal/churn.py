"""Per-file churn within a trailing window, normalized to [0, 100]."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..scanning.models import FileRecord
from .cache import GitQueryCache


@dataclass(frozen=True)
class ChurnMetric:
    path: str
    change_count: int  # commits touching the file inside the window
    score: float  # [0, 100], monotonic in change_count


@dataclass(frozen=True)
class Hotspot:
    path: str
    change_count: int
    days_since_change: Optional[int]


def churn_score(change_count: int, scale: float = DEFAULT_THRESHOLDS.churn_scale) -> float:
    """Linear, saturating churn score: ``min(100, changes * scale)``."""
    if change_count <= 0:
        return 0.0
    return min(100.0, change_count * scale)


def analyze_churn(
    files: Iterable[FileRecord],
    cache: GitQueryCache,
    days: int,
    now: int,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> dict[str, ChurnMetric]:
    """Count in-window commits for every scanned file.

    Files without history (or runs without git) score 0.
    """
    counts = cache.window_counts(days, now)
    results: dict[str, ChurnMetric] = {}
    for record in files:
        n = counts.get(record.path, 0)
        results[record.path] = ChurnMetric(
            path=record.path,
            change_count=n,
            score=churn_score(n, thresholds.churn_scale),
        )
    return results


def churn_component(metrics: dict[str, ChurnMetric]) -> float:
    """Repo-level churn health: 100 minus the mean per-file churn score."""
    if not metrics:
        return 100.0
    mean = sum(m.score for m in metrics.values()) / len(metrics)
    return 100.0 - mean


def recently_changed(metrics: dict[str, ChurnMetric]) -> int:
    return sum(1 for m in metrics.values() if m.change_count > 0)


def build_hotspots(
    metrics: dict[str, ChurnMetric],
    cache: GitQueryCache,
    now: int,
    limit: int = 10,
) -> list[Hotspot]:
    """Most-changed files in the window, ties broken by path."""
    ranked = sorted(
        (m for m in metrics.values() if m.change_count > 0),
        key=lambda m: (-m.change_count, m.path),
    )[:limit]
    hotspots = []
    for m in ranked:
        last = cache.last_change(m.path)
        days = max(0, (now - last) // 86400) if last is not None else None
        hotspots.append(Hotspot(path=m.path, change_count=m.change_count, days_since_change=days))
    return hotspots
