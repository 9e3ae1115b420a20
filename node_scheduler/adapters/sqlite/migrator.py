"""
SQL migration runner.

Applies the numbered .sql files of a migrations directory in name order and
records each one in a _migrations table. Only the part of a file above a
'-- Down' marker is executed.
"""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

DOWN_MARKER = "-- Down"


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path = MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        return conn

    def available(self) -> list[str]:
        return sorted(path.name for path in self.migrations_dir.glob("*.sql"))

    def pending_migrations(self) -> list[str]:
        """Migration files not yet applied, in apply order."""
        conn = self._get_connection()
        try:
            applied = {row[0] for row in conn.execute("SELECT filename FROM _migrations")}
        finally:
            conn.close()
        return [name for name in self.available() if name not in applied]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the applied filenames."""
        pending = self.pending_migrations()
        if not pending:
            logger.debug("No pending migrations for %s", self.db_path)
            return []

        conn = self._get_connection()
        try:
            for filename in pending:
                logger.info("Applying migration: %s", filename)
                self._apply(conn, filename)
        finally:
            conn.close()
        return pending

    def _apply(self, conn: sqlite3.Connection, filename: str) -> None:
        script = (self.migrations_dir / filename).read_text().split(DOWN_MARKER)[0]
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
