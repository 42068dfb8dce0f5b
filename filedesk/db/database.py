from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from filedesk.models.store import ExecuteResult

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    con = sqlite3.connect(db_path)
    con.row_factory = sqlite3.Row
    con.execute("PRAGMA foreign_keys=ON")
    return con


def _ensure_migrations_table(con: sqlite3.Connection) -> None:
    con.execute(
        "CREATE TABLE IF NOT EXISTS schema_migrations (version TEXT PRIMARY KEY, applied_at TEXT NOT NULL DEFAULT (datetime('now')))"
    )


def apply_migrations(con: sqlite3.Connection, migrations_dir: Path) -> List[str]:
    _ensure_migrations_table(con)
    applied = {row["version"] for row in con.execute("SELECT version FROM schema_migrations").fetchall()}

    newly_applied = []
    for sql_file in sorted(migrations_dir.glob("*.sql")):
        version = sql_file.stem  # e.g. "001_initial"
        if version in applied:
            continue
        logger.info(f"Applying migration: {version}")
        con.executescript(sql_file.read_text(encoding="utf-8"))
        con.execute("INSERT INTO schema_migrations(version) VALUES (?)", (version,))
        con.commit()
        newly_applied.append(version)
    return newly_applied


def init_or_upgrade_db(db_path: Path, migrations_dir: Optional[Path] = None) -> Path:
    con = connect(db_path)
    try:
        apply_migrations(con, migrations_dir or MIGRATIONS_DIR)
    finally:
        con.close()

    return db_path


class Database:
    """
    sqlite3-backed project store: query/execute over a short-lived connection.
    """

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)

    def _get_conn(self) -> sqlite3.Connection:
        return connect(self.db_path)

    def query(self, statement: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        con = self._get_conn()
        try:
            return [dict(row) for row in con.execute(statement, tuple(params)).fetchall()]
        finally:
            con.close()

    def execute(self, statement: str, params: Sequence[Any] = ()) -> ExecuteResult:
        con = self._get_conn()
        try:
            cur = con.execute(statement, tuple(params))
            con.commit()
            return ExecuteResult(inserted_id=cur.lastrowid, affected_count=cur.rowcount)
        finally:
            con.close()
