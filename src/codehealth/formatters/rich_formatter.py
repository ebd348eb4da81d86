"""Rich terminal formatter for codehealth."""

from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..analyzers.coverage import untested_first
from ..engine import HealthReport
from ..persistence import HistorySnapshot, Trend
from ..scoring.models import NotComputed
from .base import BaseFormatter

# Rows shown per section before truncating
MAX_ROWS = 10


def _grade_style(grade: str) -> str:
    return {"A": "green", "B": "green", "C": "yellow", "D": "red", "F": "red bold"}.get(grade, "white")


def _tier_label(tier: str) -> str:
    if tier == "critical":
        return "[red bold]critical[/red bold]"
    elif tier == "high":
        return "[red]high[/red]"
    else:
        return "[yellow]medium[/yellow]"


def _direction_label(direction: str) -> str:
    return {
        "improving": "[green]improving[/green]",
        "declining": "[red]declining[/red]",
        "stable": "[dim]stable[/dim]",
    }.get(direction, "[dim]unknown[/dim]")


class RichFormatter(BaseFormatter):
    """Score panel followed by one table per finding category."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, report: HealthReport, trend: Optional[Trend] = None) -> None:
        self._print_summary(report, trend)
        self._print_danger_zones(report)
        self._print_hotspots(report)
        self._print_ownership(report)
        self._print_coverage(report)
        self._print_dusty(report)
        self._print_markers(report)

    def format(self, report: HealthReport, trend: Optional[Trend] = None) -> str:
        with self.console.capture() as capture:
            self.render(report, trend)
        return capture.get()

    # ── Sections ──────────────────────────────────────────────────

    def _print_summary(self, report: HealthReport, trend: Optional[Trend]) -> None:
        health = report.health
        m = health.metrics
        style = _grade_style(health.grade)
        c = health.components

        lines = [
            f"[bold {style}]{health.score:.1f}[/bold {style}] / 100   "
            f"grade [bold {style}]{health.grade}[/bold {style}]",
            "",
            f"churn {c.churn:.1f}   complexity {c.complexity:.1f}   "
            f"debt {c.debt:.1f}   freshness {c.freshness:.1f}",
            f"{m.total_files} files, {m.total_loc} lines, "
            f"{m.recently_changed_files} changed in the last {report.churn_days}d",
        ]
        if m.skipped_files:
            lines.append(f"[yellow]{m.skipped_files} file(s) unreadable, skipped for content analysis[/yellow]")
        if not report.git_available:
            lines.append("[yellow]No git history: churn and ownership unavailable[/yellow]")
        if trend is not None and trend.sparkline:
            delta = f" ({trend.delta:+.1f})" if trend.delta is not None else ""
            lines.append(f"trend {trend.sparkline} {_direction_label(trend.direction)}{delta}")

        self.console.print()
        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]Codebase Health[/bold cyan]", expand=False)
        )

    def _print_danger_zones(self, report: HealthReport) -> None:
        if not report.danger_zones:
            return
        table = Table(title="Danger Zones", show_header=True, title_justify="left")
        table.add_column("File", style="cyan")
        table.add_column("Tier")
        table.add_column("Danger", justify="right")
        table.add_column("Churn", justify="right")
        table.add_column("Complexity", justify="right")
        table.add_column("Action")
        for z in report.danger_zones[:MAX_ROWS]:
            table.add_row(
                escape(z.path),
                _tier_label(z.tier),
                f"{z.danger_score:.1f}",
                f"{z.churn_score:.0f}",
                f"{z.complexity_score:.0f}",
                z.action,
            )
        self.console.print(table)

    def _print_hotspots(self, report: HealthReport) -> None:
        if not report.hotspots:
            return
        table = Table(title=f"Hotspots (last {report.churn_days}d)", title_justify="left")
        table.add_column("File", style="cyan")
        table.add_column("Changes", justify="right")
        table.add_column("Last change", justify="right")
        for h in report.hotspots:
            last = f"{h.days_since_change}d ago" if h.days_since_change is not None else "-"
            table.add_row(escape(h.path), str(h.change_count), last)
        self.console.print(table)

    def _print_ownership(self, report: HealthReport) -> None:
        own = report.ownership
        if isinstance(own, NotComputed):
            self.console.print(f"[dim]Bus factor: not computed ({own.reason})[/dim]")
            return
        self.console.print(
            f"[bold]Bus factor[/bold]: {own.total_authors} author(s), "
            f"avg bus factor {own.avg_bus_factor:.2f}, "
            f"{own.single_author_files} single-author file(s)"
        )
        if not own.high_risk_files:
            return
        table = Table(show_header=True)
        table.add_column("File", style="cyan")
        table.add_column("Owner")
        table.add_column("Share", justify="right")
        table.add_column("Risk")
        for r in own.high_risk_files[:MAX_ROWS]:
            table.add_row(
                escape(r.path),
                escape(r.primary_author),
                f"{r.primary_author_pct:.0f}%",
                _tier_label(r.risk_level),
            )
        self.console.print(table)

    def _print_coverage(self, report: HealthReport) -> None:
        cov = report.coverage
        self.console.print(
            f"[bold]Test coverage[/bold]: {cov.coverage_pct:.1f}% of source files "
            f"({cov.files_with_tests} with tests, {cov.files_without_tests} without)"
        )
        for path in cov.untested_danger_zones:
            self.console.print(f"  [red]untested danger zone[/red] {escape(path)}")
        untested = [
            r
            for r in untested_first(cov.records)
            if not r.has_tests and r.path not in cov.untested_danger_zones
        ]
        for r in untested[:MAX_ROWS]:
            self.console.print(f"  [dim]no tests[/dim] {escape(r.path)} ({r.line_count} lines)")
        if len(untested) > MAX_ROWS:
            self.console.print(f"[dim]... and {len(untested) - MAX_ROWS} more[/dim]")

    def _print_dusty(self, report: HealthReport) -> None:
        if not report.dusty:
            return
        table = Table(title=f"Dusty Files (> {report.stale_days}d)", title_justify="left")
        table.add_column("File", style="cyan")
        table.add_column("Lines", justify="right")
        table.add_column("Age", justify="right")
        table.add_column("")
        for d in report.dusty[:MAX_ROWS]:
            table.add_row(escape(d.path), str(d.line_count), f"{d.days_since_change}d", d.tier)
        self.console.print(table)
        if len(report.dusty) > MAX_ROWS:
            self.console.print(f"[dim]... and {len(report.dusty) - MAX_ROWS} more[/dim]")

    def _print_markers(self, report: HealthReport) -> None:
        m = report.health.metrics
        if not m.marker_count:
            return
        self.console.print(
            f"[bold]Debt markers[/bold]: {m.fixme_count} FIXME, {m.hack_count} HACK, "
            f"{m.todo_count} TODO, {m.xxx_count} XXX"
        )
        for mk in report.markers[:MAX_ROWS]:
            self.console.print(
                f"  [yellow]{mk.kind.value}[/yellow] {escape(mk.path)}:{mk.line_number} {escape(mk.text)}"
            )

    # ── History ───────────────────────────────────────────────────

    def render_history(self, snapshots: Sequence[HistorySnapshot], trend: Trend) -> None:
        if not snapshots:
            self.console.print(
                "[yellow]No history found.[/yellow] "
                "Run [bold]codehealth --save[/bold] first to record snapshots."
            )
            return

        self.console.print()
        self.console.print(
            f"[bold cyan]Trend:[/bold cyan] {trend.sparkline}  {_direction_label(trend.direction)}"
            + (f" ({trend.delta:+.1f})" if trend.delta is not None else "")
        )
        self.console.print()

        table = Table(show_header=True, show_lines=False, pad_edge=True)
        table.add_column("Date")
        table.add_column("Score", justify="right")
        table.add_column("Grade")
        table.add_column("Delta", justify="right")

        prev: Optional[float] = None
        for s in snapshots:
            delta_str = ""
            if prev is not None:
                d = s.score - prev
                if abs(d) >= 0.05:
                    color = "green" if d > 0 else "red"
                    delta_str = f"[{color}]{d:+.1f}[/{color}]"
            table.add_row(s.timestamp[:19], f"{s.score:.1f}", s.grade, delta_str)
            prev = s.score

        self.console.print(table)
        self.console.print()

    def format_history(self, snapshots: Sequence[HistorySnapshot], trend: Trend) -> str:
        with self.console.capture() as capture:
            self.render_history(snapshots, trend)
        return capture.get()
