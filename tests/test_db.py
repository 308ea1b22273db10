"""Database layer tests.

All tests use an in-memory SQLite database so they are fast, isolated and
leave nothing behind in the workspace.
"""

from __future__ import annotations

import sqlite3

from page_analyzer.db import SqliteResultStore
from page_analyzer.db.schema import init_db
from page_analyzer.db.urls import (
    create_url,
    delete_url,
    delete_urls,
    get_url,
    list_urls,
    reset_url,
    save_result,
)
from page_analyzer.engine.models import AnalysisResult, AnalysisStatus, HeadingCounts


def _done_result() -> AnalysisResult:
    return AnalysisResult(
        status=AnalysisStatus.DONE,
        html_version="HTML5",
        title="Example",
        headings=HeadingCounts(h1=1, h2=4, h6=2),
        internal_links=5,
        external_links=3,
        broken_links=1,
        has_login_form=True,
    )


# ---------------------------------------------------------------------------
# init_db
# ---------------------------------------------------------------------------

class TestInitDb:
    def test_idempotent(self, conn: sqlite3.Connection) -> None:
        init_db(conn)
        init_db(conn)
        tables = {
            r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert "urls" in tables

    def test_status_index_created(self, conn: sqlite3.Connection) -> None:
        indexes = {
            r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
        }
        assert "idx_urls_status" in indexes


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

class TestCreateAndGet:
    def test_create_is_queued(self, conn: sqlite3.Connection) -> None:
        record = create_url(conn, "https://example.com/")
        assert record.id > 0
        assert record.address == "https://example.com/"
        assert record.status == "queued"
        assert record.has_login_form is False
        assert record.h1 == 0

    def test_get_missing_returns_none(self, conn: sqlite3.Connection) -> None:
        assert get_url(conn, 999) is None


class TestList:
    def test_newest_first(self, conn: sqlite3.Connection) -> None:
        first = create_url(conn, "https://a.com/")
        second = create_url(conn, "https://b.com/")
        assert [r.id for r in list_urls(conn)] == [second.id, first.id]

    def test_filter_by_status(self, conn: sqlite3.Connection) -> None:
        done = create_url(conn, "https://a.com/")
        create_url(conn, "https://b.com/")
        save_result(conn, done.id, _done_result())
        assert [r.id for r in list_urls(conn, status="done")] == [done.id]


class TestSaveResult:
    def test_all_fields_persisted(self, conn: sqlite3.Connection) -> None:
        record = create_url(conn, "https://example.com/")
        save_result(conn, record.id, _done_result())
        stored = get_url(conn, record.id)
        assert stored is not None
        assert stored.status == "done"
        assert stored.title == "Example"
        assert stored.html_version == "HTML5"
        assert (stored.h1, stored.h2, stored.h3, stored.h6) == (1, 4, 0, 2)
        assert (stored.internal_links, stored.external_links, stored.broken_links) == (5, 3, 1)
        assert stored.has_login_form is True

    def test_last_write_wins(self, conn: sqlite3.Connection) -> None:
        record = create_url(conn, "https://example.com/")
        save_result(conn, record.id, _done_result())
        save_result(conn, record.id, AnalysisResult(status=AnalysisStatus.ERROR, error_message="x"))
        stored = get_url(conn, record.id)
        assert stored.status == "error"
        assert stored.title == ""
        assert stored.error_message == "x"

    def test_result_store_port(self, conn: sqlite3.Connection) -> None:
        record = create_url(conn, "https://example.com/")
        SqliteResultStore(conn).save(record.id, AnalysisResult.running())
        assert get_url(conn, record.id).status == "running"


class TestResetAndDelete:
    def test_reset_clears_fields(self, conn: sqlite3.Connection) -> None:
        record = create_url(conn, "https://example.com/")
        save_result(conn, record.id, _done_result())
        reset = reset_url(conn, record.id)
        assert reset is not None
        assert reset.status == "queued"
        assert reset.title == ""
        assert reset.broken_links == 0
        assert reset.has_login_form is False
        assert reset.address == "https://example.com/"

    def test_reset_missing(self, conn: sqlite3.Connection) -> None:
        assert reset_url(conn, 12345) is None

    def test_delete(self, conn: sqlite3.Connection) -> None:
        record = create_url(conn, "https://example.com/")
        assert delete_url(conn, record.id) is True
        assert get_url(conn, record.id) is None
        assert delete_url(conn, record.id) is False

    def test_bulk_delete(self, conn: sqlite3.Connection) -> None:
        ids = [create_url(conn, f"https://{n}.com/").id for n in "abc"]
        assert delete_urls(conn, ids[:2] + [999]) == 2
        assert [r.id for r in list_urls(conn)] == [ids[2]]

    def test_bulk_delete_empty(self, conn: sqlite3.Connection) -> None:
        assert delete_urls(conn, []) == 0
