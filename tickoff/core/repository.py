"""
FILE: tickoff/core/repository.py
PURPOSE: SQLite persistence backend (todos.db)
EXPORTS:
  - SCHEMA_SQL: Table definitions and the singleton app_state row
  - SqliteStore (PersistenceStore implementation)
    - get_connection() -> Connection
    - init_database(conn) -> None
    - load() -> SavedSnapshot
    - save(snapshot) -> None
DEPENDENCIES:
  - sqlite3 (stdlib)
  - pathlib, datetime, contextlib (stdlib)
  - tickoff.core.models (Task, Filter, SavedSnapshot)
  - tickoff.core.exceptions (LoadError, SaveError)
NOTES:
  - app_state holds one row (id = 1): the draft text and the filter code
  - tasks are keyed by id; created_at only orders them
  - save() is one transaction: settings update, DELETE all tasks, re-insert
    all tasks, commit. Any failure rolls the whole thing back
  - load() opens the file read-only and never creates or writes it
    (missing file -> NOT_FOUND, missing tables -> MALFORMED)
  - Uses row_factory for dict-like row access
"""

import contextlib
import logging
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Union

from .exceptions import LoadError, LoadErrorKind, SaveError, SaveErrorKind
from .models import Filter, SavedSnapshot, Task
from .persistence import PersistenceStore

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_state (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    input_value TEXT NOT NULL DEFAULT '',
    filter INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    description TEXT NOT NULL,
    completed BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMP NOT NULL
);

INSERT OR IGNORE INTO app_state (id, input_value, filter) VALUES (1, '', 0);
"""


class SqliteStore(PersistenceStore):
    """Snapshot stored in an app_state row plus a tasks table."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_connection(self, create: bool = True) -> sqlite3.Connection:
        """
        Get SQLite connection to the tickoff database.

        Args:
            create: Create the directory, database file and schema if missing.
                With create=False the file is opened read-only and left
                untouched; a missing file raises sqlite3.OperationalError.

        Enables row_factory for dict-like row access.
        """
        if not create:
            conn = sqlite3.connect(f"{self.path.resolve().as_uri()}?mode=ro", uri=True)
            conn.row_factory = sqlite3.Row
            return conn

        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path))
        conn.row_factory = sqlite3.Row

        try:
            self.init_database(conn)
        except sqlite3.Error:
            conn.close()
            raise

        return conn

    @staticmethod
    def init_database(conn: sqlite3.Connection) -> None:
        """
        Initialize database schema if tables don't exist.

        Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS and
        INSERT OR IGNORE for the settings row).
        """
        conn.executescript(SCHEMA_SQL)
        conn.commit()

    def load(self) -> SavedSnapshot:
        if not self.path.exists():
            raise LoadError(LoadErrorKind.NOT_FOUND, str(self.path))

        try:
            with contextlib.closing(self.get_connection(create=False)) as conn:
                tables = {
                    row["name"]
                    for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
                }
                if not {"app_state", "tasks"} <= tables:
                    raise LoadError(LoadErrorKind.MALFORMED, "tickoff tables are missing")
                settings = conn.execute(
                    "SELECT input_value, filter FROM app_state WHERE id = 1"
                ).fetchone()
                rows = conn.execute(
                    "SELECT id, description, completed FROM tasks ORDER BY created_at, rowid"
                ).fetchall()
        except sqlite3.OperationalError as e:
            # Locked, permission denied, vanished between exists() and connect()
            raise LoadError(LoadErrorKind.UNREADABLE, str(e)) from e
        except sqlite3.DatabaseError as e:
            # "file is not a database" and friends
            raise LoadError(LoadErrorKind.MALFORMED, str(e)) from e

        if settings is None:
            raise LoadError(LoadErrorKind.MALFORMED, "app_state row is missing")

        try:
            tasks = [Task.from_row(row) for row in rows]
        except (ValueError, TypeError) as e:
            raise LoadError(LoadErrorKind.MALFORMED, f"bad task id: {e}") from e

        snapshot = SavedSnapshot(
            input_value=settings["input_value"],
            filter=Filter.from_code(settings["filter"]),
            tasks=tasks,
        )
        logger.debug("Loaded %d task(s) from %s", len(tasks), self.path)
        return snapshot

    def save(self, snapshot: SavedSnapshot) -> None:
        try:
            conn = self.get_connection()
        except (OSError, sqlite3.Error) as e:
            raise SaveError(SaveErrorKind.WRITE_FAILURE, str(e)) from e

        try:
            # `with conn` commits on success and rolls back on any exception
            with conn:
                conn.execute(
                    "UPDATE app_state SET input_value = ?, filter = ? WHERE id = 1",
                    (snapshot.input_value, snapshot.filter.code),
                )
                conn.execute("DELETE FROM tasks")
                conn.executemany(
                    """
                    INSERT INTO tasks (id, description, completed, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    self._task_rows(snapshot.tasks),
                )
        except sqlite3.Error as e:
            raise SaveError(SaveErrorKind.WRITE_FAILURE, str(e)) from e
        finally:
            conn.close()

        logger.debug("Saved %d task(s) to %s", len(snapshot.tasks), self.path)

    @staticmethod
    def _task_rows(tasks: List[Task]) -> List[tuple]:
        """
        Rows for the tasks table.

        created_at is strictly increasing in list order (one microsecond
        apart) so ORDER BY created_at reproduces insertion order.
        """
        base = datetime.now()
        return [
            (
                task.id,
                task.description,
                task.completed,
                (base + timedelta(microseconds=index)).isoformat(sep=" ", timespec="microseconds"),
            )
            for index, task in enumerate(tasks)
        ]
