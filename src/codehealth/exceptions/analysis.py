"""Analysis-related exceptions: repository access, file reads, history store."""

from pathlib import Path

from .base import CodeHealthError


class AnalysisError(CodeHealthError):
    """Base class for analysis-related errors."""
    pass


class RepositoryError(AnalysisError):
    """Raised when version-control history is unavailable or the tree is empty.

    Churn and ownership degrade to empty results on this error; it is only
    fatal when the scan finds no files and no repository at all.
    """

    def __init__(self, reason: str):
        super().__init__(f"Repository unavailable: {reason}", details={"reason": reason})
        self.reason = reason


class FileReadError(AnalysisError):
    """Raised when a file cannot be read as text (unreadable or binary)."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot read file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class HistoryStoreError(AnalysisError):
    """Raised when the score history cannot be read or appended."""

    def __init__(self, reason: str):
        super().__init__(f"History store unavailable: {reason}", details={"reason": reason})
        self.reason = reason
