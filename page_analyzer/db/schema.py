"""Database schema.

``init_db(conn)`` is idempotent and safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

SCHEMA = """
CREATE TABLE IF NOT EXISTS urls (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    address         TEXT    NOT NULL,
    status          TEXT    NOT NULL DEFAULT 'queued',
    title           TEXT    NOT NULL DEFAULT '',
    html_version    TEXT    NOT NULL DEFAULT '',
    h1              INTEGER NOT NULL DEFAULT 0,
    h2              INTEGER NOT NULL DEFAULT 0,
    h3              INTEGER NOT NULL DEFAULT 0,
    h4              INTEGER NOT NULL DEFAULT 0,
    h5              INTEGER NOT NULL DEFAULT 0,
    h6              INTEGER NOT NULL DEFAULT 0,
    internal_links  INTEGER NOT NULL DEFAULT 0,
    external_links  INTEGER NOT NULL DEFAULT 0,
    broken_links    INTEGER NOT NULL DEFAULT 0,
    has_login_form  INTEGER NOT NULL DEFAULT 0,
    error_message   TEXT    NOT NULL DEFAULT '',
    created_at      INTEGER NOT NULL,
    updated_at      INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_urls_status ON urls(status);
"""


def init_db(conn: sqlite3.Connection) -> None:
    """Create the ``urls`` table and its index.

    Every DDL statement uses ``IF NOT EXISTS`` so calling this repeatedly on
    the same database is safe.
    """
    # executescript() issues an implicit COMMIT first; fine for DDL only.
    conn.executescript(SCHEMA)
