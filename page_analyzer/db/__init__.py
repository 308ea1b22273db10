"""Database layer package.

Public re-exports so callers can write::

    from page_analyzer.db import get_connection, init_db
"""

from page_analyzer.db.connection import get_connection
from page_analyzer.db.schema import init_db
from page_analyzer.db.urls import SqliteResultStore

__all__ = ["get_connection", "init_db", "SqliteResultStore"]
