"""Score history persistence and trend computation."""

from .database import HistoryDB
from .history import HistorySnapshot, HistoryStore
from .trend import Trend, compute_trend, sparkline

__all__ = [
    "HistoryDB",
    "HistorySnapshot",
    "HistoryStore",
    "Trend",
    "compute_trend",
    "sparkline",
]
