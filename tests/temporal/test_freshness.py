"""Tests for staleness tiers and the freshness component."""

import pytest
from helpers import DAY, NOW, FakeExtractor, commit, record

from codehealth.temporal.cache import GitQueryCache
from codehealth.temporal.freshness import (
    TIER_LABELS,
    analyze_freshness,
    dusty_files,
    freshness_component,
    staleness_tier,
    tier_boundaries,
)


class TestStalenessTier:
    """Test tier boundaries at the default 90-day threshold."""

    def test_default_boundaries(self):
        assert tier_boundaries(90) == (90, 120, 240, 365)

    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, ""),
            (90, ""),
            (91, "·"),
            (120, "·"),
            (121, "··"),
            (240, "··"),
            (241, "···"),
            (365, "···"),
            (366, "····"),
            (5000, "····"),
        ],
    )
    def test_tiers(self, days, expected):
        assert staleness_tier(days) == expected

    def test_tiers_scale_with_threshold(self):
        """A shorter threshold shifts every tier down proportionally."""
        assert staleness_tier(31, stale_days=30) == TIER_LABELS[0]
        assert staleness_tier(31, stale_days=90) == ""


class TestAnalyzeFreshness:
    def test_git_timestamp_preferred(self):
        cache = GitQueryCache(
            FakeExtractor([commit(NOW - 200 * DAY, ["a.py"]), commit(NOW - 10 * DAY, ["a.py"])])
        )
        result = analyze_freshness([record("a.py", mtime=0.0)], cache, 90, NOW)
        assert result["a.py"].days_since_change == 10
        assert result["a.py"].source == "git"
        assert not result["a.py"].dusty

    def test_mtime_fallback_without_history(self):
        f = record("a.py", mtime=float(NOW - 400 * DAY))
        result = analyze_freshness([f], GitQueryCache(None), 90, NOW)
        assert result["a.py"].source == "mtime"
        assert result["a.py"].days_since_change == 400
        assert result["a.py"].tier == "····"

    def test_future_mtime_clamped(self):
        f = record("a.py", mtime=float(NOW + 5 * DAY))
        result = analyze_freshness([f], GitQueryCache(None), 90, NOW)
        assert result["a.py"].days_since_change == 0


class TestFreshnessComponent:
    def test_empty_is_healthy(self):
        assert freshness_component({}) == 100.0

    def test_dusty_ratio(self):
        files = [
            record("old1.py", mtime=float(NOW - 400 * DAY)),
            record("old2.py", mtime=float(NOW - 100 * DAY)),
            record("new1.py", mtime=float(NOW - 1 * DAY)),
            record("new2.py", mtime=float(NOW)),
        ]
        result = analyze_freshness(files, GitQueryCache(None), 90, NOW)
        assert freshness_component(result) == 50.0

    def test_dusty_files_oldest_first(self):
        files = [
            record("b.py", mtime=float(NOW - 100 * DAY)),
            record("a.py", mtime=float(NOW - 400 * DAY)),
            record("c.py", mtime=float(NOW)),
        ]
        result = analyze_freshness(files, GitQueryCache(None), 90, NOW)
        assert [d.path for d in dusty_files(result)] == ["a.py", "b.py"]
