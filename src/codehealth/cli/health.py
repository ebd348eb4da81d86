"""Root command: compute, report, gate and optionally record the health score."""

from pathlib import Path
from typing import Optional

import typer

from ..engine import HealthEngine, HealthReport
from ..exceptions import CodeHealthError, ConfigurationError, HistoryStoreError
from ..formatters import get_formatter
from ..logging_config import get_logger, setup_logging
from ..persistence import HistorySnapshot, HistoryStore, Trend, compute_trend
from ..scoring.threshold import EXIT_ERROR, check_threshold
from . import app
from ._common import err_console, resolve_config

logger = get_logger(__name__)


@app.command()
def health(
    path: Path = typer.Argument(
        Path("."),
        help="Repository root to analyze (default: current directory)",
    ),
    days: Optional[int] = typer.Option(
        None,
        "--days",
        "-d",
        help="Churn window in days (default: 14)",
    ),
    stale_days: Optional[int] = typer.Option(
        None,
        "--stale-days",
        help="Days without change before a file counts as dusty (default: 90)",
    ),
    check: bool = typer.Option(
        False,
        "--check",
        help="Print only the score and grade, then exit",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Exit 1 when the score is below this value",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Append this run's score to .codehealth/history.db",
    ),
    skip_authors: bool = typer.Option(
        False,
        "--skip-authors",
        help="Skip ownership and bus-factor analysis",
    ),
    show_trend: bool = typer.Option(
        False,
        "--trend",
        help="Show stored score history and trend without analyzing",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        hidden=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Score codebase health from git history and file contents.

    Combines churn, complexity, debt markers and freshness into a 0-100
    score with a letter grade, and lists danger zones, bus-factor risks,
    untested files and dusty files.

    [bold cyan]Examples:[/bold cyan]

      codehealth

      codehealth path/to/repo --json

      codehealth --check --threshold 70

      codehealth --save && codehealth --trend
    """
    from .. import __version__

    if version:
        typer.echo(f"codehealth {__version__}")
        raise typer.Exit(0)

    try:
        if check and json_output:
            raise ConfigurationError("--check and --json cannot be combined")

        root = path.resolve()
        cfg = resolve_config(
            root,
            config=config,
            days=days,
            stale_days=stale_days,
            threshold=threshold,
            skip_authors=skip_authors,
            workers=workers,
            verbose=verbose,
            log_file=log_file,
        )
        # --check and --json keep stderr for errors only unless asked otherwise
        verbosity = cfg.verbosity
        if verbosity == "normal" and (check or json_output):
            verbosity = "quiet"
        setup_logging(verbosity, cfg.log_file)

        formatter = get_formatter("json" if json_output else "quiet" if check else "rich")
        store = HistoryStore(str(root), cfg.history_dir)

        if show_trend:
            snapshots = _load_history(store)
            trend = compute_trend(
                snapshots,
                lookback=cfg.trend_lookback,
                length=cfg.sparkline_length,
                min_delta=cfg.thresholds.trend_delta,
            )
            formatter.render_history(snapshots[-cfg.sparkline_length :], trend)
            raise typer.Exit(0)

        report = HealthEngine(root, cfg).run()
        result = check_threshold(report.score, cfg.threshold)

        if save:
            _save_snapshot(store, report)
        trend = _current_trend(
            store,
            report,
            lookback=cfg.trend_lookback,
            length=cfg.sparkline_length,
            min_delta=cfg.thresholds.trend_delta,
        )

        formatter.render(report, trend)

        if not result.passed and not json_output:
            err_console.print(
                f"[red]Score {result.score:.1f} is below threshold {result.threshold:.1f}[/red]"
            )
        raise typer.Exit(result.exit_code)

    except typer.Exit:
        raise

    except CodeHealthError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)


def _load_history(store: HistoryStore) -> list[HistorySnapshot]:
    try:
        return store.load()
    except HistoryStoreError as e:
        logger.warning("Cannot read history: %s", e)
        return []


def _save_snapshot(store: HistoryStore, report: HealthReport) -> None:
    """Append the run's score; failure is reported but never fatal."""
    try:
        store.append(report.health)
    except HistoryStoreError as e:
        logger.warning("History not updated: %s", e)
        err_console.print(f"[yellow]Warning:[/yellow] history not updated ({e.reason})")


def _current_trend(
    store: HistoryStore,
    report: HealthReport,
    lookback: int,
    length: int,
    min_delta: float,
) -> Optional[Trend]:
    """Trend including this run, or None when there is no prior history."""
    if not store.db.exists:
        return None
    snapshots = _load_history(store)
    if not snapshots or snapshots[-1].timestamp != report.health.timestamp:
        snapshots.append(
            HistorySnapshot(
                timestamp=report.health.timestamp,
                score=report.score,
                grade=report.grade,
                components=report.health.components,
            )
        )
    if len(snapshots) < 2:
        return None
    return compute_trend(snapshots, lookback=lookback, length=length, min_delta=min_delta)
