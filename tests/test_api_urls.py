"""Tests for the /api/urls endpoints.

All tests use an in-memory SQLite database via the FastAPI TestClient.  The
analysis service is replaced by a recorder so no analysis actually runs,
except in ``TestEndToEnd`` where ``respx`` serves the page.
"""

from __future__ import annotations

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from page_analyzer.api.app import create_app
from page_analyzer.config import settings
from page_analyzer.db import SqliteResultStore
from page_analyzer.db.connection import get_connection
from page_analyzer.db.schema import init_db
from page_analyzer.engine import AnalysisService, Analyzer


class FakeService:
    def __init__(self) -> None:
        self.submitted: list[tuple[str, int]] = []

    def submit(self, url: str, record_id: int) -> None:
        self.submitted.append((url, record_id))

    def shutdown(self, wait: bool = True) -> None:
        pass


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def db():
    conn = get_connection(db_path=":memory:")
    init_db(conn)
    yield conn
    conn.close()


@pytest.fixture()
def service() -> FakeService:
    return FakeService()


@pytest.fixture()
def client(db, service):
    """TestClient whose lifespan-created DB and service are swapped for fakes."""
    app = create_app()
    with TestClient(app, raise_server_exceptions=True) as c:
        c.app.state.analysis.shutdown(wait=True)
        c.app.state.db = db
        c.app.state.analysis = service
        yield c


def _create(client, url: str = "https://example.com/") -> dict:
    resp = client.post("/api/urls", json={"url": url})
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestCreateUrl:
    def test_creates_queued_record_and_submits(self, client, service) -> None:
        data = _create(client)
        assert data["status"] == "queued"
        assert data["address"] == "https://example.com/"
        assert service.submitted == [("https://example.com/", data["id"])]

    def test_rejects_missing_scheme(self, client, service) -> None:
        resp = client.post("/api/urls", json={"url": "example.com"})
        assert resp.status_code == 422
        assert service.submitted == []

    def test_rejects_empty_body(self, client) -> None:
        assert client.post("/api/urls", json={}).status_code == 422


class TestReadUrls:
    def test_empty_list(self, client) -> None:
        resp = client.get("/api/urls")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_list_and_get(self, client) -> None:
        created = _create(client)
        assert [r["id"] for r in client.get("/api/urls").json()] == [created["id"]]
        resp = client.get(f"/api/urls/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["address"] == "https://example.com/"

    def test_get_missing_is_404(self, client) -> None:
        assert client.get("/api/urls/999").status_code == 404


class TestDeleteUrls:
    def test_delete(self, client) -> None:
        created = _create(client)
        assert client.delete(f"/api/urls/{created['id']}").status_code == 200
        assert client.get(f"/api/urls/{created['id']}").status_code == 404

    def test_delete_missing_is_404(self, client) -> None:
        assert client.delete("/api/urls/999").status_code == 404

    def test_bulk_delete(self, client) -> None:
        ids = [_create(client, f"https://{n}.com/")["id"] for n in "ab"]
        resp = client.post("/api/urls/bulk-delete", json={"ids": ids})
        assert resp.status_code == 200
        assert resp.json()["count"] == 2
        assert client.get("/api/urls").json() == []

    def test_bulk_delete_requires_ids(self, client) -> None:
        assert client.post("/api/urls/bulk-delete", json={"ids": []}).status_code == 422


class TestRerun:
    def test_reanalyze_resubmits(self, client, service) -> None:
        created = _create(client)
        resp = client.post(f"/api/urls/{created['id']}/analyze")
        assert resp.status_code == 200
        assert service.submitted[-1] == ("https://example.com/", created["id"])

    def test_reanalyze_missing_is_404(self, client, service) -> None:
        assert client.post("/api/urls/999/analyze").status_code == 404
        assert service.submitted == []

    def test_bulk_rerun_skips_unknown(self, client, service) -> None:
        created = _create(client)
        service.submitted.clear()
        resp = client.post("/api/urls/bulk-rerun", json={"ids": [created["id"], 999]})
        assert resp.status_code == 200
        assert resp.json()["count"] == 1
        assert service.submitted == [("https://example.com/", created["id"])]


class TestAuth:
    def test_token_required_when_configured(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "api_token", "devtoken123")
        assert client.get("/api/urls").status_code == 401
        assert client.get("/api/urls", headers={"Authorization": "Bearer wrong"}).status_code == 401
        resp = client.get("/api/urls", headers={"Authorization": "Bearer devtoken123"})
        assert resp.status_code == 200


class TestEndToEnd:
    def test_submitted_url_is_analysed(self, client, db) -> None:
        html = '<title>Home</title><h1>Hi</h1><a href="/a">a</a>'
        with respx.mock(assert_all_called=False) as router:
            router.route(host="testserver").pass_through()
            router.get("https://site.test/").mock(
                return_value=httpx.Response(200, text=html, headers={"Content-Type": "text/html"})
            )
            router.head("https://site.test/a").mock(return_value=httpx.Response(200))

            client.app.state.analysis = AnalysisService(Analyzer(store=SqliteResultStore(db)))
            created = _create(client, "https://site.test/")
            client.app.state.analysis.shutdown(wait=True)

            record = client.get(f"/api/urls/{created['id']}").json()

        assert record["status"] == "done"
        assert record["title"] == "Home"
        assert record["h1"] == 1
        assert record["internal_links"] == 1
        assert record["broken_links"] == 0
