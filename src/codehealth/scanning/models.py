"""Data models for the scanning layer."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FileRecord:
    """Immutable snapshot of one scanned file.

    ``content`` is None when the file could not be read as text; such files
    still take part in churn, freshness and ownership but are skipped by the
    content-dependent analyzers.
    """

    path: str  # relative to the scan root, POSIX separators
    language: str
    line_count: int
    size_bytes: int
    mtime: float  # filesystem modification time, unix seconds
    is_test: bool = False
    content: Optional[str] = None
    read_error: Optional[str] = None

    @property
    def readable(self) -> bool:
        return self.content is not None


@dataclass(frozen=True)
class ScanResult:
    """Ordered file set for one run, plus scan bookkeeping."""

    root: str
    files: tuple[FileRecord, ...]
    git_available: bool
    excluded: int = 0  # filtered by extension or ignore rules

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    @property
    def skipped(self) -> int:
        """Files kept in the run but unreadable for content analysis."""
        return sum(1 for f in self.files if not f.readable)

    @property
    def source_files(self) -> list[FileRecord]:
        return [f for f in self.files if not f.is_test]

    @property
    def total_loc(self) -> int:
        return sum(f.line_count for f in self.files)
