"""JSON formatter for codehealth.

Field names here are a stable, documented contract for CI consumers.
``bus_factor`` is omitted entirely when ownership analysis was skipped.
"""

import json
from typing import Any, Optional, Sequence

from ..engine import HealthReport
from ..persistence import HistorySnapshot, Trend
from ..scoring.models import NotComputed
from .base import BaseFormatter


def report_to_dict(report: HealthReport, trend: Optional[Trend] = None) -> dict[str, Any]:
    health = report.health
    m = health.metrics
    coverage = report.coverage

    data: dict[str, Any] = {
        "score": health.score,
        "grade": health.grade,
        "timestamp": health.timestamp,
        "components": health.components.as_dict(),
        "metrics": {
            "total_files": m.total_files,
            "total_loc": m.total_loc,
            "recently_changed_files": m.recently_changed_files,
            "todo_count": m.todo_count,
            "fixme_count": m.fixme_count,
            "hack_count": m.hack_count,
            "xxx_count": m.xxx_count,
            "dusty_files": m.dusty_files,
            "danger_zones": m.danger_zones,
            "skipped_files": m.skipped_files,
        },
        "danger_zones": [
            {
                "path": z.path,
                "churn": z.churn_score,
                "complexity": z.complexity_score,
                "danger_score": z.danger_score,
                "tier": z.tier,
                "action": z.action,
                "changes": z.change_count,
                "reason": z.reason,
            }
            for z in report.danger_zones
        ],
        "test_coverage": {
            "coverage_pct": coverage.coverage_pct,
            "files_with_tests": coverage.files_with_tests,
            "files_without_tests": coverage.files_without_tests,
            "inline_tested": coverage.inline_tested,
            "untested_danger_zones": list(coverage.untested_danger_zones),
        },
        "hotspots": [
            {
                "path": h.path,
                "changes": h.change_count,
                "days_since_change": h.days_since_change,
            }
            for h in report.hotspots
        ],
        "dusty_files": [
            {
                "path": d.path,
                "lines": d.line_count,
                "days_since_change": d.days_since_change,
                "tier": d.tier,
            }
            for d in report.dusty
        ],
        "debt_markers": [
            {"path": mk.path, "line": mk.line_number, "kind": mk.kind.value, "text": mk.text}
            for mk in report.markers
        ],
        "analysis": {
            "churn_days": report.churn_days,
            "stale_days": report.stale_days,
            "git_available": report.git_available,
        },
    }

    if not isinstance(report.ownership, NotComputed):
        own = report.ownership
        data["bus_factor"] = {
            "total_authors": own.total_authors,
            "single_author_files": own.single_author_files,
            "avg_bus_factor": own.avg_bus_factor,
            "high_risk_files": [
                {
                    "path": r.path,
                    "primary_author": r.primary_author,
                    "primary_author_pct": r.primary_author_pct,
                    "risk_level": r.risk_level,
                    "reason": r.reason,
                }
                for r in own.high_risk_files
            ],
        }

    if trend is not None:
        data["trend"] = trend_to_dict(trend)
    return data


def trend_to_dict(trend: Trend) -> dict[str, Any]:
    return {
        "direction": trend.direction,
        "delta": trend.delta,
        "scores": list(trend.scores),
        "sparkline": trend.sparkline,
    }


class JsonFormatter(BaseFormatter):
    """Render the report as JSON."""

    def render(self, report: HealthReport, trend: Optional[Trend] = None) -> None:
        print(self.format(report, trend))

    def format(self, report: HealthReport, trend: Optional[Trend] = None) -> str:
        return json.dumps(report_to_dict(report, trend), indent=2)

    def format_history(self, snapshots: Sequence[HistorySnapshot], trend: Trend) -> str:
        data = {
            "snapshots": [
                {
                    "timestamp": s.timestamp,
                    "score": s.score,
                    "grade": s.grade,
                    "components": s.components.as_dict(),
                }
                for s in snapshots
            ],
            "trend": trend_to_dict(trend),
        }
        return json.dumps(data, indent=2)
