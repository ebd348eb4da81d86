"""Exception hierarchy for codehealth."""

from .analysis import (
    AnalysisError,
    FileReadError,
    HistoryStoreError,
    RepositoryError,
)
from .base import CodeHealthError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "CodeHealthError",
    "AnalysisError",
    "FileReadError",
    "RepositoryError",
    "HistoryStoreError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
