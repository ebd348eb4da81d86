"""Ownership and bus-factor analysis.

Contribution shares come from ``git blame`` line attribution at HEAD, or
from commit counts over the full history when blame is disabled or yields
nothing for a file. Shares for a file always sum to 1.0.
"""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..logging_config import get_logger
from ..scanning.models import FileRecord
from .cache import GitQueryCache

logger = get_logger(__name__)

# Primary share (percent) at which a single-author file is critical
CRITICAL_OWNERSHIP_PCT = 95.0


@dataclass(frozen=True)
class OwnershipRecord:
    path: str
    shares: tuple[tuple[str, float], ...]  # (author, share), largest first
    primary_author: str
    primary_share: float
    bus_factor: int
    single_author: bool
    method: str  # "blame" or "commits"

    @property
    def share_map(self) -> dict[str, float]:
        return dict(self.shares)


@dataclass(frozen=True)
class BusFactorRisk:
    path: str
    primary_author: str
    primary_author_pct: float
    risk_level: str  # "critical" or "high"
    reason: str


@dataclass(frozen=True)
class OwnershipSummary:
    total_authors: int
    single_author_files: int
    avg_bus_factor: float
    high_risk_files: tuple[BusFactorRisk, ...]
    records: dict[str, OwnershipRecord]


def build_record(
    path: str,
    counts: Counter,
    method: str,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> Optional[OwnershipRecord]:
    """Normalize raw per-author counts into an OwnershipRecord.

    Returns None when there is no attribution at all.
    """
    total = sum(c for c in counts.values() if c > 0)
    if total == 0:
        return None

    # Largest share first; ties broken by author for stable output
    ordered = sorted(((a, c) for a, c in counts.items() if c > 0), key=lambda ac: (-ac[1], ac[0]))
    shares = tuple((author, count / total) for author, count in ordered)
    primary_author, primary_share = shares[0]

    significant = sum(1 for _, s in shares if s >= thresholds.significant_share)
    return OwnershipRecord(
        path=path,
        shares=shares,
        primary_author=primary_author,
        primary_share=primary_share,
        bus_factor=max(1, significant),
        single_author=primary_share > thresholds.single_author_share,
        method=method,
    )


def risk_for(record: OwnershipRecord) -> BusFactorRisk:
    pct = round(record.primary_share * 100.0, 1)
    if len(record.shares) == 1:
        reason = "only author of this file"
    else:
        reason = f"wrote {pct:.0f}% of this file"
    return BusFactorRisk(
        path=record.path,
        primary_author=record.primary_author,
        primary_author_pct=pct,
        risk_level="critical" if pct >= CRITICAL_OWNERSHIP_PCT else "high",
        reason=reason,
    )


class OwnershipAnalyzer:
    """Attribute authorship per file and summarize bus-factor risk."""

    def __init__(
        self,
        cache: GitQueryCache,
        method: str = "blame",
        thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
        workers: int = 4,
    ):
        self.cache = cache
        self.method = method
        self.thresholds = thresholds
        self.workers = workers

    def _attribute(self, record: FileRecord) -> Optional[OwnershipRecord]:
        counts: Counter = Counter()
        method = self.method
        if method == "blame" and record.readable:
            counts = self.cache.blame(record.path)
        if not counts:
            method = "commits"
            counts = self.cache.commit_authors(record.path)
        return build_record(record.path, counts, method, self.thresholds)

    def analyze(self, files: Iterable[FileRecord]) -> OwnershipSummary:
        files = list(files)
        records: dict[str, OwnershipRecord] = {}
        if self.cache.available and files:
            # Blame is the dominant cost; run it across the pool. Results are
            # merged only after every file has been attributed.
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                attributed = list(executor.map(self._attribute, files))
            for rec in attributed:
                if rec is not None:
                    records[rec.path] = rec

        authors = {author for rec in records.values() for author, _ in rec.shares}
        single = sorted(
            (rec for rec in records.values() if rec.single_author),
            key=lambda r: (-r.primary_share, r.path),
        )
        avg = float(np.mean([r.bus_factor for r in records.values()])) if records else 0.0

        logger.debug(
            "Ownership: %d files attributed, %d authors, %d single-author",
            len(records),
            len(authors),
            len(single),
        )
        return OwnershipSummary(
            total_authors=len(authors),
            single_author_files=len(single),
            avg_bus_factor=round(avg, 2),
            high_risk_files=tuple(risk_for(r) for r in single),
            records=records,
        )
