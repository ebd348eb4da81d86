"""Data models for temporal (git-based) analysis."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Commit:
    hash: str
    timestamp: int  # unix seconds
    author: str  # lower-cased author email
    files: tuple[str, ...]  # paths relative to the scan root
    subject: str = ""


@dataclass(frozen=True)
class GitHistory:
    commits: tuple[Commit, ...]  # newest first
    file_set: frozenset[str]  # all files ever seen
    span_days: int  # time range covered

    @property
    def total_commits(self) -> int:
        return len(self.commits)

    @property
    def is_empty(self) -> bool:
        return not self.commits


EMPTY_HISTORY = GitHistory(commits=(), file_set=frozenset(), span_days=0)
