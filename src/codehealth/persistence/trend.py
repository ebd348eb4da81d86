"""Trend direction and sparkline over stored snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import DEFAULT_THRESHOLDS
from .history import HistorySnapshot

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"


@dataclass(frozen=True)
class Trend:
    direction: str  # "improving", "declining", "stable" or "unknown"
    delta: Optional[float]  # latest minus the compared snapshot
    latest: Optional[float]
    scores: tuple[float, ...]  # recent scores, oldest first, as stored
    sparkline: str


def sparkline(values: Sequence[float]) -> str:
    """Eight-level block sparkline scaled to the values' own range."""
    if not values:
        return ""
    mn, mx = min(values), max(values)
    if mx == mn:
        return SPARK_BLOCKS[3] * len(values)
    top = len(SPARK_BLOCKS) - 1
    return "".join(SPARK_BLOCKS[min(top, int((v - mn) / (mx - mn) * top + 0.5))] for v in values)


def classify_delta(delta: float, min_delta: float = DEFAULT_THRESHOLDS.trend_delta) -> str:
    if delta >= min_delta:
        return "improving"
    if delta <= -min_delta:
        return "declining"
    return "stable"


def compute_trend(
    snapshots: Sequence[HistorySnapshot],
    lookback: int = 1,
    length: int = 20,
    min_delta: float = DEFAULT_THRESHOLDS.trend_delta,
) -> Trend:
    """Compare the latest score with the one ``lookback`` snapshots earlier.

    With fewer than ``lookback + 1`` snapshots the oldest one is used; with a
    single snapshot the direction is "unknown".
    """
    scores = tuple(s.score for s in snapshots)
    recent = scores[-length:]
    if not scores:
        return Trend(direction="unknown", delta=None, latest=None, scores=(), sparkline="")
    latest = scores[-1]
    if len(scores) < 2:
        return Trend(
            direction="unknown", delta=None, latest=latest, scores=recent, sparkline=sparkline(recent)
        )
    base = scores[max(0, len(scores) - 1 - lookback)]
    delta = round(latest - base, 1)
    return Trend(
        direction=classify_delta(delta, min_delta),
        delta=delta,
        latest=latest,
        scores=recent,
        sparkline=sparkline(recent),
    )
