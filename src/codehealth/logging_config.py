"""Logging for codehealth.

Terminal logs go to stderr through rich so stdout carries only the report.
An optional plain-text file mirrors them, which is what CI jobs archive.
Only the ``codehealth`` logger is configured; the root logger is left to
whatever application embeds the engine.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .exceptions import InvalidPathError

LOGGER_NAME = "codehealth"

VERBOSITY_LEVELS: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """Attach handlers to the ``codehealth`` logger for one CLI invocation.

    Calling it again replaces the handlers from the previous call.

    Raises:
        ValueError: If ``verbosity`` is not quiet, normal or verbose
        InvalidPathError: If ``log_file`` cannot be opened for appending
    """
    if verbosity not in VERBOSITY_LEVELS:
        raise ValueError(f"unknown verbosity {verbosity!r}")
    level = VERBOSITY_LEVELS[verbosity]
    verbose = verbosity == "verbose"

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            show_time=verbose,
            show_path=verbose,
        )
    )

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            raise InvalidPathError(Path(log_file), f"cannot open log file: {e.strerror or e}")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger namespaced under ``codehealth`` (``codehealth.engine`` etc.)."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
