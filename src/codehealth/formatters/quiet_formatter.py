"""Quiet formatter: one summary line, used by check-only mode."""

from typing import Optional

from ..engine import HealthReport
from ..persistence import Trend
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render just the score and grade."""

    def render(self, report: HealthReport, trend: Optional[Trend] = None) -> None:
        print(self.format(report, trend))

    def format(self, report: HealthReport, trend: Optional[Trend] = None) -> str:
        line = f"{report.score:.1f} {report.grade}"
        if trend is not None and trend.delta is not None:
            line += f" {trend.direction} ({trend.delta:+.1f})"
        return line
