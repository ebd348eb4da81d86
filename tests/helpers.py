"""Builders shared by the test modules: fixed clock, git repos, canned records."""

import os
import subprocess
from collections import Counter
from pathlib import Path

from codehealth.scanning.languages import detect_language
from codehealth.scanning.models import FileRecord
from codehealth.temporal.models import Commit, GitHistory

# Fixed reference time for every time-dependent test: 2024-06-01T00:00:00Z
NOW = 1717200000
DAY = 86400


class GitRepo:
    """Throwaway git repository with explicit commit dates and authors."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.email", "alice@example.com")
        self.git("config", "user.name", "Alice")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str, env: dict | None = None) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.root), *args],
            capture_output=True,
            text=True,
            env={**os.environ, **(env or {})},
            check=True,
        )
        return result.stdout

    def write(self, path: str, content: str) -> Path:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        return target

    def commit(
        self,
        message: str,
        when: int,
        author: str = "alice@example.com",
        paths: tuple[str, ...] = (),
    ) -> None:
        """Stage ``paths`` (everything when empty) and commit at ``when``."""
        self.git("add", *(paths or (".",)))
        name = author.split("@", 1)[0].capitalize()
        stamp = f"@{when} +0000"
        self.git(
            "commit",
            "-q",
            "--allow-empty",
            "-m",
            message,
            env={
                "GIT_AUTHOR_NAME": name,
                "GIT_AUTHOR_EMAIL": author,
                "GIT_COMMITTER_NAME": name,
                "GIT_COMMITTER_EMAIL": author,
                "GIT_AUTHOR_DATE": stamp,
                "GIT_COMMITTER_DATE": stamp,
            },
        )

    def touch_and_commit(self, path: str, line: str, when: int, author: str = "alice@example.com") -> None:
        """Append ``line`` to ``path`` and commit only that file."""
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "a") as f:
            f.write(line + "\n")
        self.commit(f"edit {path}", when, author=author, paths=(path,))


def make_source(functions: int = 0, body_lines: int = 3, depth: int = 0, filler: int = 0) -> str:
    """Python source with a controllable shape.

    ``depth`` nests if-blocks inside the first function.
    """
    lines: list[str] = []
    for i in range(functions):
        lines.append(f"def func_{i}(x):")
        indent = "    "
        if i == 0:
            for d in range(depth):
                lines.append(f"{indent}if x > {d}:")
                indent += "    "
        for b in range(body_lines):
            lines.append(f"{indent}x = x + {b}")
        lines.append(f"{indent}return x")
        lines.append("")
    lines.extend(f"VALUE_{i} = {i}" for i in range(filler))
    return "\n".join(lines) + "\n"


class FakeExtractor:
    """Stands in for GitExtractor with canned history and blame output."""

    def __init__(self, commits=(), blame=None):
        commits = tuple(sorted(commits, key=lambda c: -c.timestamp))
        self.history = GitHistory(
            commits=commits,
            file_set=frozenset(f for c in commits for f in c.files),
            span_days=0,
        )
        self.blame_output = blame or {}
        self.extract_calls = 0
        self.blame_calls: list[str] = []

    def extract(self):
        self.extract_calls += 1
        return self.history

    def blame(self, path):
        self.blame_calls.append(path)
        return Counter(self.blame_output.get(path, {}))


def commit(ts, files, author="alice@example.com", sha=None):
    """Build a Commit at unix time ``ts`` touching ``files``."""
    return Commit(hash=sha or f"{ts:040x}", timestamp=ts, author=author, files=tuple(files))


def record(path, content="x = 1\n", language=None, is_test=False, mtime=0.0):
    """Build a readable FileRecord."""
    return FileRecord(
        path=path,
        language=language or detect_language(path),
        line_count=len(content.splitlines()),
        size_bytes=len(content.encode()),
        mtime=mtime,
        is_test=is_test,
        content=content,
    )
