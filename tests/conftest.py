"""Shared fixtures.

Every test runs against a throwaway workspace directory so the on-disk
database under ``~/.webpage_analyzer`` is never touched.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Generator

import pytest

from page_analyzer.config import settings
from page_analyzer.db.connection import get_connection
from page_analyzer.db.schema import init_db


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(settings, "workspace_dir", tmp_path / "workspace")
    monkeypatch.setattr(settings, "api_token", "")
    return settings.workspace_dir


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory connection with the schema initialised."""
    connection = get_connection(db_path=":memory:")
    init_db(connection)
    yield connection
    connection.close()
