"""Append-only score history.

Snapshots are only ever inserted; nothing here updates or deletes a row.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from .. import __version__
from ..exceptions import HistoryStoreError
from ..logging_config import get_logger
from ..scoring.models import ComponentScores, HealthScore
from .database import HistoryDB

logger = get_logger(__name__)


@dataclass(frozen=True)
class HistorySnapshot:
    timestamp: str
    score: float
    grade: str
    components: ComponentScores
    total_files: int = 0
    total_loc: int = 0


class HistoryStore:
    """Read and append snapshots in ``<root>/<history_dir>/history.db``."""

    def __init__(self, project_root: str, history_dir: str = ".codehealth"):
        self.db = HistoryDB(project_root, history_dir)

    def append(self, health: HealthScore, timestamp: str | None = None) -> HistorySnapshot:
        """Persist one snapshot of ``health``.

        Raises:
            HistoryStoreError: If the database is corrupt or unwritable
        """
        snapshot = HistorySnapshot(
            timestamp=timestamp or health.timestamp,
            score=health.score,
            grade=health.grade,
            components=health.components,
            total_files=health.metrics.total_files,
            total_loc=health.metrics.total_loc,
        )
        with self.db as db:
            try:
                db.conn.execute(
                    """
                    INSERT INTO snapshots
                        (timestamp, tool_version, score, grade,
                         churn, complexity, debt, freshness, total_files, total_loc)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        snapshot.timestamp,
                        __version__,
                        snapshot.score,
                        snapshot.grade,
                        snapshot.components.churn,
                        snapshot.components.complexity,
                        snapshot.components.debt,
                        snapshot.components.freshness,
                        snapshot.total_files,
                        snapshot.total_loc,
                    ),
                )
                db.conn.commit()
            except sqlite3.Error as e:
                raise HistoryStoreError(f"cannot append snapshot: {e}")
        logger.info("Snapshot saved (score=%.1f, grade=%s)", snapshot.score, snapshot.grade)
        return snapshot

    def load(self, last_n: int | None = None) -> list[HistorySnapshot]:
        """Snapshots ordered oldest to newest; the most recent ``last_n`` if given.

        A project without a history database has an empty history.

        Raises:
            HistoryStoreError: If the database is corrupt or unreadable
        """
        if not self.db.exists:
            return []
        with self.db as db:
            try:
                rows = db.conn.execute(
                    "SELECT * FROM snapshots ORDER BY timestamp, id"
                ).fetchall()
            except sqlite3.Error as e:
                raise HistoryStoreError(f"cannot read snapshots: {e}")
        snapshots = [
            HistorySnapshot(
                timestamp=row["timestamp"],
                score=row["score"],
                grade=row["grade"],
                components=ComponentScores(
                    churn=row["churn"],
                    complexity=row["complexity"],
                    debt=row["debt"],
                    freshness=row["freshness"],
                ),
                total_files=row["total_files"],
                total_loc=row["total_loc"],
            )
            for row in rows
        ]
        if last_n is not None:
            snapshots = snapshots[-last_n:]
        return snapshots
