"""Read-only git access via subprocess: log, ls-files and blame."""

import re
import subprocess
from collections import Counter
from pathlib import Path
from typing import Optional

from ..exceptions import RepositoryError
from ..logging_config import get_logger
from .models import EMPTY_HISTORY, Commit, GitHistory

logger = get_logger(__name__)


class GitExtractor:
    """Parse git output into structured history for one scan root.

    The scan root may be a subdirectory of the work tree; every path this
    class returns is relative to the scan root.
    """

    def __init__(self, repo_path: str, max_commits: int = 0):
        self.repo_path = str(Path(repo_path).resolve())
        self.max_commits = max_commits
        self._prefix: Optional[str] = None

    def _git(self, *args: str) -> list[str]:
        return ["git", "-C", self.repo_path, "-c", "core.quotepath=off", *args]

    # ── Repository checks ──────────────────────────────────────

    def is_repo(self) -> bool:
        try:
            result = subprocess.run(
                self._git("rev-parse", "--git-dir"),
                capture_output=True,
                text=True,
                timeout=5,
            )
            return result.returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    def has_commits(self) -> bool:
        result = subprocess.run(
            self._git("rev-parse", "--verify", "--quiet", "HEAD"),
            capture_output=True,
            text=True,
        )
        return result.returncode == 0

    @property
    def prefix(self) -> str:
        """Scan root relative to the work-tree top level ("" at the top)."""
        if self._prefix is None:
            result = subprocess.run(
                self._git("rev-parse", "--show-prefix"),
                capture_output=True,
                text=True,
            )
            self._prefix = result.stdout.strip() if result.returncode == 0 else ""
        return self._prefix

    def _relative(self, toplevel_path: str) -> Optional[str]:
        prefix = self.prefix
        if not prefix:
            return toplevel_path
        if toplevel_path.startswith(prefix):
            return toplevel_path[len(prefix):]
        return None

    # ── File listing ───────────────────────────────────────────

    def tracked_files(self) -> list[str]:
        """Tracked plus untracked-but-not-ignored files under the scan root.

        Raises:
            RepositoryError: If git cannot list the work tree
        """
        result = subprocess.run(
            self._git("ls-files", "-z", "--cached", "--others", "--exclude-standard"),
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise RepositoryError(f"git ls-files failed: {result.stderr.strip()}")
        return sorted({p for p in result.stdout.split("\0") if p})

    # ── History ────────────────────────────────────────────────

    def extract(self) -> GitHistory:
        """Parse the full git log (bounded by max_commits).

        Returns an empty history for a repository without commits.

        Raises:
            RepositoryError: If the directory is not a git repository or the
                log cannot be read
        """
        if not self.is_repo():
            raise RepositoryError(f"{self.repo_path} is not a git repository")

        if not self.has_commits():
            logger.info("Repository has no commits yet")
            return EMPTY_HISTORY

        raw = self._run_git_log()
        commits = self._parse_log(raw)
        if not commits:
            return EMPTY_HISTORY

        file_set = set()
        for c in commits:
            file_set.update(c.files)

        span_days = 0
        if len(commits) >= 2:
            newest = commits[0].timestamp
            oldest = commits[-1].timestamp
            span_days = max(1, (newest - oldest) // 86400)

        return GitHistory(
            commits=tuple(commits),
            file_set=frozenset(file_set),
            span_days=span_days,
        )

    # Largest git log output read into memory (200MB). A longer log is an
    # error rather than a truncated history; git_max_commits bounds it.
    _MAX_OUTPUT_BYTES = 200 * 1024 * 1024

    def _run_git_log(self) -> str:
        cmd = self._git("log", "--format=%H|%at|%ae|%s", "--name-only")
        if self.max_commits:
            cmd.append(f"-n{self.max_commits}")
        try:
            # Popen for streaming to avoid loading unbounded output into memory
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise RepositoryError(f"git not available: {e}")

        try:
            chunks = []
            total_size = 0
            stdout = proc.stdout
            if stdout is None:
                raise RepositoryError("git log produced no output stream")
            while True:
                chunk = stdout.read(1024 * 1024)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > self._MAX_OUTPUT_BYTES:
                    proc.kill()
                    proc.wait()
                    raise RepositoryError(
                        f"git log output exceeds {self._MAX_OUTPUT_BYTES // (1024 * 1024)}MB; "
                        "set git_max_commits to bound the history read"
                    )
                chunks.append(chunk)

            proc.wait()
            if proc.returncode != 0:
                stderr = proc.stderr.read() if proc.stderr else ""
                raise RepositoryError(f"git log failed: {stderr.strip()}")
            return "".join(chunks)
        finally:
            if proc.stdout:
                proc.stdout.close()
            if proc.stderr:
                proc.stderr.close()

    # Matches: 40-char hex hash | unix timestamp | author email | subject
    # Subject can contain | characters, so we use maxsplit=3 during parsing
    _HEADER_RE = re.compile(r"^[0-9a-f]{40}\|\d+\|[^|]*\|.*$")

    def _parse_log(self, raw: str) -> list[Commit]:
        """Parse git log output into Commit objects.

        Header lines are detected by regex rather than blank-line separation,
        so merge commits (no files) and consecutive headers parse correctly.
        Commits touching nothing under the scan root are dropped.
        """
        commits = []
        current_hash = None
        current_ts = 0
        current_author = ""
        current_subject = ""
        current_files: list[str] = []

        def flush() -> None:
            if current_hash and current_files:
                commits.append(
                    Commit(
                        hash=current_hash,
                        timestamp=current_ts,
                        author=current_author,
                        files=tuple(current_files),
                        subject=current_subject,
                    )
                )

        for line in raw.split("\n"):
            line = line.strip()
            if not line:
                continue

            if self._HEADER_RE.match(line):
                flush()
                parts = line.split("|", 3)
                current_hash = parts[0]
                current_ts = int(parts[1])
                current_author = parts[2].lower()
                current_subject = parts[3] if len(parts) > 3 else ""
                current_files = []
            elif current_hash:
                rel = self._relative(line)
                if rel is not None:
                    current_files.append(rel)

        flush()
        return commits

    # ── Blame ──────────────────────────────────────────────────

    _AUTHOR_MAIL_RE = re.compile(r"^author-mail <?([^>]*)>?$")

    def blame(self, path: str) -> Counter:
        """Per-author line counts for ``path`` at HEAD.

        Returns an empty Counter for files git cannot blame (untracked,
        binary, or deleted at HEAD).
        """
        result = subprocess.run(
            self._git("blame", "--line-porcelain", "HEAD", "--", path),
            capture_output=True,
            text=True,
            errors="replace",
        )
        counts: Counter = Counter()
        if result.returncode != 0:
            logger.debug("git blame failed for %s: %s", path, result.stderr.strip())
            return counts
        for line in result.stdout.split("\n"):
            m = self._AUTHOR_MAIL_RE.match(line)
            if m:
                counts[m.group(1).lower()] += 1
        return counts
