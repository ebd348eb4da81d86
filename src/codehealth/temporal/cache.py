"""Call-scoped memo of git queries for one analysis run.

A ``GitQueryCache`` is created by the engine at the start of a run, handed
to each history-based analyzer, and dropped when the run ends. Nothing is
shared across runs or stored at module level, so two runs never observe each
other's git snapshot.
"""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Optional

from ..exceptions import RepositoryError
from ..logging_config import get_logger
from .git_extractor import GitExtractor
from .models import EMPTY_HISTORY, GitHistory

logger = get_logger(__name__)

_SECONDS_PER_DAY = 86400


class GitQueryCache:
    """Memoised, thread-safe front for a ``GitExtractor``.

    Usage::

        cache = GitQueryCache(GitExtractor(root))
        history = cache.history()
        n = cache.changes_within("src/app.py", days=14, now=now)
        authors = cache.blame("src/app.py")
    """

    def __init__(self, extractor: Optional[GitExtractor]):
        self._extractor = extractor
        self._lock = Lock()
        self._history: Optional[GitHistory] = None
        self._error: Optional[RepositoryError] = None
        self._blame: dict[str, Counter] = {}
        self._windows: dict[tuple[int, int], Counter] = {}
        self._last_change: Optional[dict[str, int]] = None
        self._commit_authors: Optional[dict[str, Counter]] = None

    @property
    def available(self) -> bool:
        """True when history was read successfully (possibly empty)."""
        self.history()
        return self._extractor is not None and self._error is None

    @property
    def error(self) -> Optional[RepositoryError]:
        self.history()
        return self._error

    def history(self) -> GitHistory:
        """Full log, read once per run. Degrades to an empty history."""
        with self._lock:
            if self._history is None:
                if self._extractor is None:
                    self._error = RepositoryError("no git repository")
                    self._history = EMPTY_HISTORY
                else:
                    try:
                        self._history = self._extractor.extract()
                    except RepositoryError as e:
                        logger.warning("%s; churn and ownership degrade to empty", e)
                        self._error = e
                        self._history = EMPTY_HISTORY
            return self._history

    def window_counts(self, days: int, now: int) -> Counter:
        """Commit counts per path within the trailing ``days`` before ``now``."""
        history = self.history()
        key = (days, now)
        with self._lock:
            if key not in self._windows:
                cutoff = now - days * _SECONDS_PER_DAY
                counts: Counter = Counter()
                for commit in history.commits:
                    if cutoff <= commit.timestamp <= now:
                        counts.update(set(commit.files))
                self._windows[key] = counts
            return self._windows[key]

    def changes_within(self, path: str, days: int, now: int) -> int:
        return self.window_counts(days, now).get(path, 0)

    def last_change(self, path: str) -> Optional[int]:
        """Timestamp of the newest commit touching ``path``, if any."""
        history = self.history()
        with self._lock:
            if self._last_change is None:
                newest: dict[str, int] = {}
                for commit in history.commits:
                    for f in commit.files:
                        if commit.timestamp > newest.get(f, -1):
                            newest[f] = commit.timestamp
                self._last_change = newest
            return self._last_change.get(path)

    def commit_authors(self, path: str) -> Counter:
        """Commits per author touching ``path`` over the full history."""
        history = self.history()
        with self._lock:
            if self._commit_authors is None:
                per_file: dict[str, Counter] = {}
                for commit in history.commits:
                    for f in set(commit.files):
                        per_file.setdefault(f, Counter())[commit.author] += 1
                self._commit_authors = per_file
            return Counter(self._commit_authors.get(path, ()))

    def blame(self, path: str) -> Counter:
        """Per-author line counts at HEAD; git is invoked at most once per path."""
        with self._lock:
            cached = self._blame.get(path)
        if cached is not None:
            return Counter(cached)
        if self._extractor is None or not self.available:
            return Counter()
        # git runs outside the lock so blames proceed concurrently
        counts = self._extractor.blame(path)
        with self._lock:
            self._blame.setdefault(path, counts)
        return Counter(counts)
