"""SQLite-backed score history stored in a project-local directory."""

import sqlite3
from pathlib import Path
from typing import Optional

from ..exceptions import HistoryStoreError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


class HistoryDB:
    """Manages ``<history_dir>/history.db`` under the project root.

    Usage::

        with HistoryDB("/path/to/project") as db:
            db.conn.execute(...)

    Every sqlite or filesystem failure surfaces as ``HistoryStoreError``.
    """

    def __init__(self, project_root: str, history_dir: str = ".codehealth") -> None:
        self.db_dir: Path = Path(project_root) / history_dir
        self.db_path: Path = self.db_dir / "history.db"
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def exists(self) -> bool:
        return self.db_path.exists()

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError("HistoryDB is not connected. Use as context manager or call connect().")
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        """Create the history directory with a .gitignore so it stays untracked."""
        self.db_dir.mkdir(parents=True, exist_ok=True)
        gitignore = self.db_dir / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text("*\n")

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations."""
        try:
            self._ensure_dir()
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            self._conn = conn
            self._migrate()
        except (sqlite3.Error, OSError) as e:
            self.close()
            raise HistoryStoreError(f"{self.db_path}: {e}")
        except HistoryStoreError:
            self.close()
            raise
        logger.debug("History DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "HistoryDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create / upgrade all tables."""
        c = self.conn

        c.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER NOT NULL
            )
            """
        )
        row = c.execute("SELECT version FROM schema_version").fetchone()
        if row is None:
            c.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (_SCHEMA_VERSION,),
            )
        elif row["version"] > _SCHEMA_VERSION:
            raise HistoryStoreError(
                f"history schema v{row['version']} is newer than supported v{_SCHEMA_VERSION}"
            )

        # ── snapshots ────────────────────────────────────────────
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp       TEXT    NOT NULL,
                tool_version    TEXT    NOT NULL,
                score           REAL    NOT NULL,
                grade           TEXT    NOT NULL,
                churn           REAL    NOT NULL,
                complexity      REAL    NOT NULL,
                debt            REAL    NOT NULL,
                freshness       REAL    NOT NULL,
                total_files     INTEGER NOT NULL DEFAULT 0,
                total_loc       INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        c.execute(
            "CREATE INDEX IF NOT EXISTS idx_snapshots_timestamp ON snapshots(timestamp, id)"
        )
        c.commit()
