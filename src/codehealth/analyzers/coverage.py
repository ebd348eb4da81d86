"""Test-file correlation by naming convention.

This is not line coverage. A source file counts as tested when a file
following its language's test-naming convention exists in the scanned set,
or when the file carries inline test markers of its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable

from ..scanning.languages import candidate_test_names, has_inline_tests
from ..scanning.models import FileRecord


class CoverageState(str, Enum):
    EXTERNAL = "has-external-test"
    INLINE = "has-inline-test"
    NONE = "none"


@dataclass(frozen=True)
class CoverageRecord:
    path: str
    state: CoverageState
    test_files: tuple[str, ...] = ()
    line_count: int = 0

    @property
    def has_tests(self) -> bool:
        return self.state is not CoverageState.NONE


@dataclass(frozen=True)
class CoverageSummary:
    coverage_pct: float
    files_with_tests: int
    files_without_tests: int
    inline_tested: int
    untested_danger_zones: tuple[str, ...]
    records: dict[str, CoverageRecord]


class TestCorrelator:
    """Map source files to candidate test files within one scanned set."""

    __test__ = False  # not a pytest class

    def __init__(self, files: Iterable[FileRecord]):
        self._tests_by_name: dict[str, list[str]] = {}
        for record in files:
            if record.is_test:
                name = PurePosixPath(record.path).name
                self._tests_by_name.setdefault(name, []).append(record.path)

    def correlate(self, record: FileRecord) -> CoverageRecord:
        """Coverage state for one non-test source file."""
        matches: list[str] = []
        for candidate in candidate_test_names(record.path, record.language):
            matches.extend(self._tests_by_name.get(candidate, ()))
        if matches:
            return CoverageRecord(
                path=record.path,
                state=CoverageState.EXTERNAL,
                test_files=tuple(sorted(set(matches))),
                line_count=record.line_count,
            )
        if record.content is not None and has_inline_tests(record.content, record.language):
            return CoverageRecord(
                path=record.path, state=CoverageState.INLINE, line_count=record.line_count
            )
        return CoverageRecord(path=record.path, state=CoverageState.NONE, line_count=record.line_count)


def summarize_coverage(
    records: dict[str, CoverageRecord],
    danger_paths: Iterable[str],
) -> CoverageSummary:
    """Coverage percentage plus the danger zones no test touches."""
    tested = sum(1 for r in records.values() if r.has_tests)
    inline = sum(1 for r in records.values() if r.state is CoverageState.INLINE)
    total = len(records)
    untested_danger = tuple(
        p for p in danger_paths if p in records and not records[p].has_tests
    )
    return CoverageSummary(
        coverage_pct=round(100.0 * tested / total, 1) if total else 0.0,
        files_with_tests=tested,
        files_without_tests=total - tested,
        inline_tested=inline,
        untested_danger_zones=untested_danger,
        records=records,
    )


def untested_first(records: dict[str, CoverageRecord]) -> list[CoverageRecord]:
    """Untested files first, larger files before smaller ones."""
    return sorted(records.values(), key=lambda r: (r.has_tests, -r.line_count, r.path))
