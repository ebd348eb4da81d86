"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

err_console = Console(stderr=True)


def resolve_config(
    root: Path,
    config: Optional[Path] = None,
    days: Optional[int] = None,
    stale_days: Optional[int] = None,
    threshold: Optional[float] = None,
    skip_authors: bool = False,
    workers: Optional[int] = None,
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> AnalysisConfig:
    """Build the run configuration from CLI options.

    Unset options fall through to config files and environment variables.
    """
    return load_config(
        config_file=config,
        root=root,
        churn_days=days,
        stale_days=stale_days,
        threshold=threshold,
        skip_ownership=True if skip_authors else None,
        workers=workers,
        verbose=verbose,
        log_file=str(log_file) if log_file else None,
    )
