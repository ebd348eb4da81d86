"""Days-since-last-change per file and the repo-level freshness component."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..scanning.models import FileRecord
from .cache import GitQueryCache

_SECONDS_PER_DAY = 86400

# Deeper tiers as multiples of the base stale-days threshold
# (90 -> 120 / 240 / 365 days).
TIER_MULTIPLIERS = (4 / 3, 8 / 3, 365 / 90)

TIER_LABELS = ("·", "··", "···", "····")


@dataclass(frozen=True)
class FreshnessRecord:
    path: str
    days_since_change: int
    tier: str  # "" when not dusty, else one to four dots
    source: str  # "git" or "mtime"
    line_count: int = 0

    @property
    def dusty(self) -> bool:
        return bool(self.tier)


def tier_boundaries(stale_days: int) -> tuple[int, int, int, int]:
    """Lower bound of tier one and upper bounds of tiers one to three."""
    return (stale_days,) + tuple(round(stale_days * m) for m in TIER_MULTIPLIERS)


def staleness_tier(days: int, stale_days: int = 90) -> str:
    """Map days-since-change to a staleness tier label ("" = fresh)."""
    base, first, second, third = tier_boundaries(stale_days)
    if days <= base:
        return ""
    if days <= first:
        return TIER_LABELS[0]
    if days <= second:
        return TIER_LABELS[1]
    if days <= third:
        return TIER_LABELS[2]
    return TIER_LABELS[3]


def analyze_freshness(
    files: Iterable[FileRecord],
    cache: GitQueryCache,
    stale_days: int,
    now: int,
) -> dict[str, FreshnessRecord]:
    """Last-change age for each file, falling back to mtime without history."""
    results: dict[str, FreshnessRecord] = {}
    for record in files:
        last = cache.last_change(record.path)
        if last is not None:
            ts, source = last, "git"
        else:
            ts, source = int(record.mtime), "mtime"
        days = max(0, (now - ts) // _SECONDS_PER_DAY)
        results[record.path] = FreshnessRecord(
            path=record.path,
            days_since_change=days,
            tier=staleness_tier(days, stale_days),
            source=source,
            line_count=record.line_count,
        )
    return results


def freshness_component(records: dict[str, FreshnessRecord]) -> float:
    """``100 * (1 - dusty_ratio)`` across the whole file set."""
    if not records:
        return 100.0
    dusty = sum(1 for r in records.values() if r.dusty)
    return 100.0 * (1.0 - dusty / len(records))


def dusty_files(records: dict[str, FreshnessRecord]) -> list[FreshnessRecord]:
    """Dusty files, oldest first."""
    return sorted(
        (r for r in records.values() if r.dusty),
        key=lambda r: (-r.days_since_change, r.path),
    )
