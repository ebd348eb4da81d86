"""Tests for the codehealth command line."""

import json
import logging
import time

import pytest
from helpers import DAY
from typer.testing import CliRunner

from codehealth import __version__
from codehealth.cli import app

runner = CliRunner()


@pytest.fixture
def repo(git_repo):
    """Small repository with recent history so churn is non-zero."""
    now = int(time.time())
    git_repo.write("src/app.py", "def main():\n    # TODO: parse args\n    return 0\n")
    git_repo.write("src/util.py", "def helper(x):\n    return x\n")
    git_repo.write("tests/test_util.py", "def test_helper():\n    assert True\n")
    git_repo.commit("initial", now - 30 * DAY)
    git_repo.touch_and_commit("src/app.py", "VERSION = 1", now - DAY)
    return git_repo


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestJsonOutput:
    """Test the machine-readable report."""

    def test_schema(self, repo):
        result = runner.invoke(app, [str(repo.root), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        for key in (
            "score",
            "grade",
            "components",
            "metrics",
            "danger_zones",
            "test_coverage",
            "bus_factor",
            "hotspots",
            "dusty_files",
            "debt_markers",
        ):
            assert key in data
        assert set(data["components"]) == {"churn", "complexity", "debt", "freshness"}
        assert data["metrics"]["total_files"] == 3
        assert data["metrics"]["todo_count"] == 1
        assert data["metrics"]["recently_changed_files"] == 1
        assert data["test_coverage"]["coverage_pct"] == 50.0
        assert data["debt_markers"][0]["path"] == "src/app.py"
        assert data["hotspots"][0]["path"] == "src/app.py"

    def test_skip_authors_omits_bus_factor(self, repo):
        result = runner.invoke(app, [str(repo.root), "--json", "--skip-authors"])
        assert result.exit_code == 0
        assert "bus_factor" not in json.loads(result.stdout)

    def test_days_option(self, repo):
        result = runner.invoke(app, [str(repo.root), "--json", "--days", "60"])
        data = json.loads(result.stdout)
        assert data["analysis"]["churn_days"] == 60
        assert data["metrics"]["recently_changed_files"] == 3


class TestThreshold:
    """Test the CI exit-code contract."""

    def test_passes_without_threshold(self, repo):
        result = runner.invoke(app, [str(repo.root), "--check"])
        assert result.exit_code == 0

    def test_below_threshold_exits_one(self, repo):
        result = runner.invoke(app, [str(repo.root), "--check", "--threshold", "100"])
        assert result.exit_code == 1

    def test_at_or_above_threshold_passes(self, repo):
        result = runner.invoke(app, [str(repo.root), "--json", "--threshold", "0"])
        assert result.exit_code == 0

    def test_json_unaffected_by_failure(self, repo):
        """The threshold decision does not change the JSON payload."""
        passing = runner.invoke(app, [str(repo.root), "--json"])
        failing = runner.invoke(app, [str(repo.root), "--json", "--threshold", "100"])
        assert failing.exit_code == 1
        assert json.loads(failing.stdout)["score"] == json.loads(passing.stdout)["score"]


class TestCheckMode:
    def test_empty_repository(self, git_repo):
        result = runner.invoke(app, [str(git_repo.root), "--check"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "100.0 A"


class TestErrors:
    """Test fatal errors exit with code 2."""

    def test_check_with_json(self, repo):
        result = runner.invoke(app, [str(repo.root), "--check", "--json"])
        assert result.exit_code == 2

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "missing"), "--check"])
        assert result.exit_code == 2

    def test_threshold_out_of_range(self, repo):
        result = runner.invoke(app, [str(repo.root), "--threshold", "150"])
        assert result.exit_code == 2

    def test_empty_directory_without_git(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path), "--check"])
        assert result.exit_code == 2


class TestHistory:
    """Test --save and --trend."""

    def test_save_then_trend(self, repo):
        assert runner.invoke(app, [str(repo.root), "--check", "--save"]).exit_code == 0
        assert runner.invoke(app, [str(repo.root), "--check", "--save"]).exit_code == 0

        result = runner.invoke(app, [str(repo.root), "--trend", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["snapshots"]) == 2
        assert data["trend"]["direction"] == "stable"
        assert (repo.root / ".codehealth" / ".gitignore").exists()

    def test_history_dir_not_scanned(self, repo):
        runner.invoke(app, [str(repo.root), "--check", "--save"])
        result = runner.invoke(app, [str(repo.root), "--json"])
        assert json.loads(result.stdout)["metrics"]["total_files"] == 3

    def test_trend_without_history(self, repo):
        result = runner.invoke(app, [str(repo.root), "--trend"])
        assert result.exit_code == 0
        assert "No history found" in result.stdout

    def test_save_failure_is_not_fatal(self, repo):
        (repo.root / ".codehealth").write_text("blocked")
        result = runner.invoke(app, [str(repo.root), "--check", "--save"])
        assert result.exit_code == 0


class TestRichOutput:
    def test_summary_panel(self, repo):
        result = runner.invoke(app, [str(repo.root)])
        assert result.exit_code == 0
        assert "Codebase Health" in result.stdout
        assert "Bus factor" in result.stdout


class TestLogging:
    """Test how output mode, --verbose and CODEHEALTH_VERBOSITY set the log level."""

    @staticmethod
    def level():
        return logging.getLogger("codehealth").level

    def test_rich_run_logs_warnings(self, repo):
        assert runner.invoke(app, [str(repo.root)]).exit_code == 0
        assert self.level() == logging.WARNING

    @pytest.mark.parametrize("mode", ["--json", "--check"])
    def test_machine_modes_are_quiet(self, repo, mode):
        assert runner.invoke(app, [str(repo.root), mode]).exit_code == 0
        assert self.level() == logging.ERROR

    def test_quiet_from_environment(self, repo, monkeypatch):
        monkeypatch.setenv("CODEHEALTH_VERBOSITY", "quiet")
        assert runner.invoke(app, [str(repo.root)]).exit_code == 0
        assert self.level() == logging.ERROR

    def test_verbose_wins_over_machine_mode(self, repo):
        assert runner.invoke(app, [str(repo.root), "--check", "--verbose"]).exit_code == 0
        assert self.level() == logging.DEBUG

    def test_invalid_verbosity(self, repo, monkeypatch):
        monkeypatch.setenv("CODEHEALTH_VERBOSITY", "loud")
        assert runner.invoke(app, [str(repo.root), "--check"]).exit_code == 2

    def test_log_file_receives_records(self, repo, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(app, [str(repo.root), "--check", "--verbose", "--log-file", str(log)])
        assert result.exit_code == 0
        assert "Score" in log.read_text()

    def test_unopenable_log_file(self, repo, tmp_path):
        log = tmp_path / "missing" / "run.log"
        result = runner.invoke(app, [str(repo.root), "--check", "--log-file", str(log)])
        assert result.exit_code == 2
