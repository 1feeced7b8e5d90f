"""SQLite storage for the tape catalog.

A single ``tapes`` table holds every cassette. The store opens one connection
when it is created and keeps it until ``close()``; callers never share it.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from cassettes.errors import NotFoundError, StorageError, ValidationError
from cassettes.models import Tape

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS tapes (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    tape TEXT NOT NULL,
    timestamp DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


def _configure_connection(conn: sqlite3.Connection) -> None:
    """Apply row factory and timeout settings."""

    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA busy_timeout=5000")
    conn.execute("PRAGMA foreign_keys=ON")


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Open a SQLite connection to the catalog database."""

    try:
        conn = sqlite3.connect(db_path, timeout=30)
        _configure_connection(conn)
    except sqlite3.Error as exc:
        raise StorageError(f"Could not open database {db_path}: {exc}") from exc
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create the tapes table if it doesn't exist."""

    try:
        conn.executescript(SCHEMA)
        conn.commit()
    except sqlite3.Error as exc:
        raise StorageError(f"Could not initialize schema: {exc}") from exc


def _require_fields(title: str, tape: str) -> None:
    if not title or not title.strip():
        raise ValidationError("Title is required.")
    if not tape or not tape.strip():
        raise ValidationError("Tape label is required.")


def _row_to_tape(row: sqlite3.Row) -> Tape:
    try:
        created_at = datetime.fromisoformat(str(row["timestamp"]))
    except ValueError as exc:
        raise StorageError(
            f"Unreadable timestamp {row['timestamp']!r} for tape {row['id']}"
        ) from exc
    return Tape(
        id=int(row["id"]),
        title=row["title"],
        tape=row["tape"],
        created_at=created_at,
    )


class TapeStore:
    """CRUD access to the ``tapes`` table.

    Every method either completes its single statement or raises. SQLite
    failures surface as :class:`StorageError`; writes aimed at a missing id
    raise :class:`NotFoundError`.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn = get_connection(self.db_path)
        init_db(self._conn)
        logger.info(
            "Opened tape database",
            extra={"event": "catalog_opened", "context": {"db_path": str(self.db_path)}},
        )

    def close(self) -> None:
        self._conn.close()

    def list_all(self) -> list[Tape]:
        """Return every tape, most recently created first."""

        try:
            rows = self._conn.execute(
                "SELECT id, title, tape, timestamp FROM tapes ORDER BY id DESC"
            ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not list tapes: {exc}") from exc
        return [_row_to_tape(row) for row in rows]

    def insert(self, title: str, tape: str) -> int:
        """Insert a tape and return its new id.

        The timestamp is left to the column default so the database stamps it.
        """

        _require_fields(title, tape)
        try:
            cursor = self._conn.execute(
                "INSERT INTO tapes (title, tape) VALUES (?, ?)",
                (title, tape),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._rollback()
            raise StorageError(f"Could not insert tape: {exc}") from exc
        return int(cursor.lastrowid)

    def update(self, tape_id: int, title: str, tape: str) -> None:
        _require_fields(title, tape)
        try:
            cursor = self._conn.execute(
                "UPDATE tapes SET title = ?, tape = ? WHERE id = ?",
                (title, tape, tape_id),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._rollback()
            raise StorageError(f"Could not update tape {tape_id}: {exc}") from exc
        if cursor.rowcount == 0:
            raise NotFoundError(f"Tape {tape_id} does not exist.")

    def delete(self, tape_id: int) -> None:
        try:
            cursor = self._conn.execute("DELETE FROM tapes WHERE id = ?", (tape_id,))
            self._conn.commit()
        except sqlite3.Error as exc:
            self._rollback()
            raise StorageError(f"Could not delete tape {tape_id}: {exc}") from exc
        if cursor.rowcount == 0:
            raise NotFoundError(f"Tape {tape_id} does not exist.")

    def _rollback(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error:
            logger.warning(
                "Rollback failed",
                extra={"event": "rollback_failed", "context": {"db_path": str(self.db_path)}},
            )
