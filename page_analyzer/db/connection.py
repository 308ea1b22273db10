"""SQLite connection factory.

Usage::

    from page_analyzer.db.connection import get_connection

    with get_connection() as conn:
        cursor = conn.execute("SELECT 1")
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from page_analyzer.config import settings


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    The connection is created with ``check_same_thread=False`` because
    analysis runs finish on worker threads; writers serialise through
    :class:`~page_analyzer.db.urls.SqliteResultStore`.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        settings.ensure_workspace()

    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn
