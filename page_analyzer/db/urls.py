"""CRUD operations for the ``urls`` table, plus the SQLite result store."""

from __future__ import annotations

import sqlite3
import threading
from time import time
from typing import Iterable, Optional

from page_analyzer.db.models import UrlRecord
from page_analyzer.engine.models import AnalysisResult, AnalysisStatus

# One connection is shared by request handlers and analysis worker threads.
_db_lock = threading.RLock()

_RESULT_COLUMNS = (
    "status",
    "html_version",
    "title",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "internal_links",
    "external_links",
    "broken_links",
    "has_login_form",
    "error_message",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_record(row: sqlite3.Row) -> UrlRecord:
    data = dict(row)
    data["has_login_form"] = bool(data["has_login_form"])
    return UrlRecord(**data)


def _write_result(conn: sqlite3.Connection, url_id: int, result: AnalysisResult) -> None:
    record = result.as_record()
    set_clause = ", ".join(f"{col} = ?" for col in _RESULT_COLUMNS)
    values = [record[col] for col in _RESULT_COLUMNS] + [int(time()), url_id]
    with _db_lock, conn:
        conn.execute(
            f"UPDATE urls SET {set_clause}, updated_at = ? WHERE id = ?", values  # noqa: S608
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_url(conn: sqlite3.Connection, address: str) -> UrlRecord:
    """Insert a new ``queued`` record for *address* and return it."""
    now = int(time())
    with _db_lock, conn:
        cursor = conn.execute(
            "INSERT INTO urls (address, status, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (address, AnalysisStatus.QUEUED.value, now, now),
        )
        url_id = cursor.lastrowid
    return get_url(conn, url_id)  # type: ignore[arg-type,return-value]


def get_url(conn: sqlite3.Connection, url_id: int) -> Optional[UrlRecord]:
    """Fetch a single record by id.  Returns ``None`` if not found."""
    with _db_lock:
        row = conn.execute("SELECT * FROM urls WHERE id = ?", (url_id,)).fetchone()
    return _row_to_record(row) if row else None


def list_urls(conn: sqlite3.Connection, status: Optional[str] = None) -> list[UrlRecord]:
    """Return all records, newest first, optionally filtered by ``status``."""
    with _db_lock:
        if status:
            rows = conn.execute(
                "SELECT * FROM urls WHERE status = ? ORDER BY id DESC", (status,)
            ).fetchall()
        else:
            rows = conn.execute("SELECT * FROM urls ORDER BY id DESC").fetchall()
    return [_row_to_record(r) for r in rows]


def delete_url(conn: sqlite3.Connection, url_id: int) -> bool:
    """Delete a record.  Returns ``False`` if it did not exist."""
    with _db_lock, conn:
        cursor = conn.execute("DELETE FROM urls WHERE id = ?", (url_id,))
    return cursor.rowcount > 0


def delete_urls(conn: sqlite3.Connection, url_ids: Iterable[int]) -> int:
    """Delete several records and return how many were removed."""
    ids = list(url_ids)
    if not ids:
        return 0
    placeholders = ", ".join("?" for _ in ids)
    with _db_lock, conn:
        cursor = conn.execute(
            f"DELETE FROM urls WHERE id IN ({placeholders})", ids  # noqa: S608
        )
    return cursor.rowcount


def reset_url(conn: sqlite3.Connection, url_id: int) -> Optional[UrlRecord]:
    """Clear previous analysis fields and put the record back to ``queued``.

    Returns ``None`` if the record does not exist.
    """
    if get_url(conn, url_id) is None:
        return None
    _write_result(conn, url_id, AnalysisResult(status=AnalysisStatus.QUEUED))
    return get_url(conn, url_id)


def save_result(conn: sqlite3.Connection, url_id: int, result: AnalysisResult) -> None:
    """Persist every analysis field of *result* onto record *url_id*."""
    _write_result(conn, url_id, result)


class SqliteResultStore:
    """:class:`~page_analyzer.engine.ResultStore` backed by the ``urls`` table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def save(self, record_id: int, result: AnalysisResult) -> None:
        save_result(self.conn, int(record_id), result)
