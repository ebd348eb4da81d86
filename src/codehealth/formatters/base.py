"""Base formatter interface for codehealth output rendering."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..engine import HealthReport
from ..persistence import HistorySnapshot, Trend


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: HealthReport, trend: Optional[Trend] = None) -> None:
        """Write the report to stdout."""

    @abstractmethod
    def format(self, report: HealthReport, trend: Optional[Trend] = None) -> str:
        """Return the formatted report."""

    def render_history(self, snapshots: Sequence[HistorySnapshot], trend: Trend) -> None:
        """Write stored snapshots and their trend to stdout."""
        print(self.format_history(snapshots, trend))

    def format_history(self, snapshots: Sequence[HistorySnapshot], trend: Trend) -> str:
        lines = [f"{s.timestamp}  {s.score:5.1f}  {s.grade}" for s in snapshots]
        lines.append(f"{trend.sparkline}  {trend.direction}")
        return "\n".join(lines)
