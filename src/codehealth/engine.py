"""Run orchestration for one health-score computation.

Data flows strictly forward: scan, then the independent per-file analyses,
then danger-zone classification and aggregation. Every run owns a fresh
``GitQueryCache``; nothing is carried between runs except what the caller
explicitly appends to the history store.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .analyzers.complexity import ComplexityEstimator, ComplexityMetric, complexity_component
from .analyzers.coverage import CoverageRecord, CoverageSummary, TestCorrelator, summarize_coverage
from .analyzers.danger import DangerZone, DangerZoneClassifier
from .analyzers.debt import (
    DebtMarker,
    DebtScanner,
    MarkerKind,
    debt_component,
    marker_counts,
    sort_for_display,
)
from .config import AnalysisConfig
from .exceptions import RepositoryError
from .logging_config import get_logger
from .scanning import RepositoryScanner, ScanResult
from .scanning.models import FileRecord
from .scoring.aggregator import aggregate
from .scoring.models import ComponentScores, HealthMetrics, HealthScore, NotComputed
from .temporal.cache import GitQueryCache
from .temporal.churn import (
    ChurnMetric,
    Hotspot,
    analyze_churn,
    build_hotspots,
    churn_component,
    recently_changed,
)
from .temporal.freshness import (
    FreshnessRecord,
    analyze_freshness,
    dusty_files,
    freshness_component,
)
from .temporal.git_extractor import GitExtractor
from .temporal.ownership import OwnershipAnalyzer, OwnershipSummary

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileAnalysis:
    """Content-derived results for one file, produced by a pool worker."""

    path: str
    complexity: Optional[ComplexityMetric]
    markers: tuple[DebtMarker, ...]
    coverage: Optional[CoverageRecord]  # None for test files


@dataclass(frozen=True)
class HealthReport:
    """Everything one run produced, ready for formatting."""

    root: str
    health: HealthScore
    churn_days: int
    stale_days: int
    git_available: bool
    danger_zones: tuple[DangerZone, ...]
    coverage: CoverageSummary
    ownership: Union[OwnershipSummary, NotComputed]
    hotspots: tuple[Hotspot, ...] = ()
    dusty: tuple[FreshnessRecord, ...] = ()
    markers: tuple[DebtMarker, ...] = ()
    churn: dict[str, ChurnMetric] = field(default_factory=dict)
    complexity: dict[str, ComplexityMetric] = field(default_factory=dict)
    freshness: dict[str, FreshnessRecord] = field(default_factory=dict)

    @property
    def score(self) -> float:
        return self.health.score

    @property
    def grade(self) -> str:
        return self.health.grade


def iso_timestamp(now: int) -> str:
    return datetime.fromtimestamp(now, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class HealthEngine:
    """Compute a HealthReport for one directory.

    Usage::

        engine = HealthEngine("/path/to/repo", load_config())
        report = engine.run()
        print(report.score, report.grade)

    ``now`` pins the reference time (unix seconds) so repeated runs over an
    unchanged repository produce identical results.
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        config: Optional[AnalysisConfig] = None,
        now: Optional[int] = None,
    ):
        self.root_dir = str(Path(root_dir).resolve())
        self.config = config or AnalysisConfig()
        self.now = now

    def run(self) -> HealthReport:
        """Scan and analyze the tree.

        Raises:
            InvalidPathError: If the root is missing or not a directory
            RepositoryError: If no files are found and there is no repository
        """
        cfg = self.config
        now = self.now if self.now is not None else int(time.time())
        thresholds = cfg.thresholds

        extractor = GitExtractor(self.root_dir, max_commits=cfg.git_max_commits)
        scan = RepositoryScanner(self.root_dir, cfg, git=extractor).scan()
        if not scan.files and not scan.git_available:
            raise RepositoryError(f"no source files and no git repository at {self.root_dir}")

        cache = GitQueryCache(extractor if scan.git_available else None)
        if not scan.git_available:
            logger.warning("Not a git repository; churn and ownership degrade to empty")

        churn = analyze_churn(scan.files, cache, cfg.churn_days, now, thresholds)
        freshness = analyze_freshness(scan.files, cache, cfg.stale_days, now)
        analyses = self._analyze_contents(scan)

        complexity = {a.path: a.complexity for a in analyses if a.complexity is not None}
        markers = [m for a in analyses for m in a.markers]
        coverage_records = {a.path: a.coverage for a in analyses if a.coverage is not None}

        if cfg.skip_ownership:
            ownership: Union[OwnershipSummary, NotComputed] = NotComputed(
                "ownership analysis skipped"
            )
        else:
            ownership = OwnershipAnalyzer(
                cache,
                method=cfg.ownership_method,
                thresholds=thresholds,
                workers=cfg.worker_count,
            ).analyze(scan.files)

        danger_zones = DangerZoneClassifier(thresholds, cfg.churn_days).classify(churn, complexity)
        coverage = summarize_coverage(coverage_records, [z.path for z in danger_zones])

        readable_loc = sum(f.line_count for f in scan.files if f.readable)
        components = ComponentScores(
            churn=churn_component(churn),
            complexity=complexity_component(complexity),
            debt=debt_component(len(markers), readable_loc, thresholds),
            freshness=freshness_component(freshness),
        )
        counts = marker_counts(markers)
        dusty = dusty_files(freshness)
        metrics = HealthMetrics(
            total_files=len(scan.files),
            total_loc=scan.total_loc,
            recently_changed_files=recently_changed(churn),
            todo_count=counts[MarkerKind.TODO],
            fixme_count=counts[MarkerKind.FIXME],
            hack_count=counts[MarkerKind.HACK],
            xxx_count=counts[MarkerKind.XXX],
            dusty_files=len(dusty),
            danger_zones=len(danger_zones),
            skipped_files=scan.skipped,
        )
        health = aggregate(components, metrics, timestamp=iso_timestamp(now))
        logger.info(
            "Score %.1f (%s): %d files, %d danger zones",
            health.score,
            health.grade,
            metrics.total_files,
            metrics.danger_zones,
        )

        return HealthReport(
            root=self.root_dir,
            health=health,
            churn_days=cfg.churn_days,
            stale_days=cfg.stale_days,
            git_available=cache.available,
            danger_zones=tuple(danger_zones),
            coverage=coverage,
            ownership=ownership,
            hotspots=tuple(build_hotspots(churn, cache, now)),
            dusty=tuple(dusty),
            markers=tuple(sort_for_display(markers)),
            churn=churn,
            complexity=complexity,
            freshness=freshness,
        )

    def _analyze_contents(self, scan: ScanResult) -> list[FileAnalysis]:
        """Complexity, debt and test correlation for every file, in parallel.

        Results come back in scan order once every worker has finished.
        """
        estimator = ComplexityEstimator(self.config.thresholds)
        debt = DebtScanner()
        correlator = TestCorrelator(scan.files)

        def analyze(record: FileRecord) -> FileAnalysis:
            return FileAnalysis(
                path=record.path,
                complexity=estimator.estimate(record),
                markers=tuple(debt.scan(record)),
                coverage=None if record.is_test else correlator.correlate(record),
            )

        if not scan.files:
            return []
        with ThreadPoolExecutor(max_workers=self.config.worker_count) as executor:
            results = list(executor.map(analyze, scan.files))
        logger.debug("Content analysis complete for %d files", len(results))
        return results
