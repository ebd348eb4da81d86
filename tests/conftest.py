"""Shared test fixtures for codehealth tests."""

import shutil

import pytest
from helpers import GitRepo

from codehealth.config import AnalysisConfig


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def git_repo(tmp_path):
    """Empty initialized git repository."""
    if shutil.which("git") is None:
        pytest.skip("git not found")
    return GitRepo(tmp_path / "repo")


@pytest.fixture
def config():
    """Single-worker config so results never depend on pool scheduling."""
    return AnalysisConfig(workers=1)

