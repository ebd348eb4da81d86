"""Tests for naming-convention test correlation."""

from helpers import record

from codehealth.analyzers.coverage import (
    CoverageState,
    TestCorrelator,
    summarize_coverage,
    untested_first,
)


def correlate_all(files):
    correlator = TestCorrelator(files)
    return {f.path: correlator.correlate(f) for f in files if not f.is_test}


class TestTestCorrelator:
    """Test external and inline test detection."""

    def test_python_test_in_other_directory(self):
        files = [
            record("pkg/models.py"),
            record("tests/test_models.py", is_test=True),
        ]
        records = correlate_all(files)
        assert records["pkg/models.py"].state is CoverageState.EXTERNAL
        assert records["pkg/models.py"].test_files == ("tests/test_models.py",)

    def test_go_sibling_test(self):
        files = [
            record("server/handler.go", "package server\n"),
            record("server/handler_test.go", "package server\n", is_test=True),
            record("server/router.go", "package server\n"),
        ]
        records = correlate_all(files)
        assert records["server/handler.go"].has_tests
        assert records["server/router.go"].state is CoverageState.NONE

    def test_rust_inline_tests(self):
        content = "pub fn add() {}\n#[cfg(test)]\nmod tests {}\n"
        records = correlate_all([record("src/lib.rs", content)])
        assert records["src/lib.rs"].state is CoverageState.INLINE

    def test_external_wins_over_inline(self):
        files = [
            record("src/util.rs", "#[test]\nfn t() {}\n"),
            record("tests/util_test.rs", is_test=True),
        ]
        records = correlate_all(files)
        assert records["src/util.rs"].state is CoverageState.EXTERNAL

    def test_test_file_for_other_language_ignored(self):
        files = [record("lib/api.ts"), record("lib/api.test.js", is_test=True)]
        records = correlate_all(files)
        assert not records["lib/api.ts"].has_tests


class TestSummarizeCoverage:
    def test_percentage_and_untested_danger(self):
        files = [
            record("a.py"),
            record("b.py"),
            record("c.py"),
            record("d.py"),
            record("test_a.py", is_test=True),
        ]
        records = correlate_all(files)
        summary = summarize_coverage(records, ["c.py", "a.py"])

        assert summary.coverage_pct == 25.0
        assert summary.files_with_tests == 1
        assert summary.files_without_tests == 3
        assert summary.untested_danger_zones == ("c.py",)

    def test_empty(self):
        summary = summarize_coverage({}, [])
        assert summary.coverage_pct == 0.0
        assert summary.untested_danger_zones == ()

    def test_untested_first(self):
        files = [
            record("big.py", "x = 1\n" * 50),
            record("small.py"),
            record("tested.py", "x = 1\n" * 100),
            record("test_tested.py", is_test=True),
        ]
        ordered = untested_first(correlate_all(files))
        assert [r.path for r in ordered] == ["big.py", "small.py", "tested.py"]
