"""URL analysis endpoints.

Routes
------
POST   /api/urls                Body: {"url": "https://..."}  → queue + analyze
GET    /api/urls                                               → list records
GET    /api/urls/{id}                                          → one record
DELETE /api/urls/{id}                                          → delete
POST   /api/urls/{id}/analyze                                  → reset + re-run
POST   /api/urls/bulk-delete    Body: {"ids": [1, 2]}          → delete many
POST   /api/urls/bulk-rerun     Body: {"ids": [1, 2]}          → re-run many
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, HttpUrl

from page_analyzer.db import urls as url_db
from page_analyzer.db.models import UrlRecord

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class UrlCreateRequest(BaseModel):
    url: HttpUrl


class IdsRequest(BaseModel):
    ids: list[int] = Field(min_length=1)


class UrlResponse(BaseModel):
    id: int
    address: str
    status: str
    title: str
    html_version: str
    h1: int
    h2: int
    h3: int
    h4: int
    h5: int
    h6: int
    internal_links: int
    external_links: int
    broken_links: int
    has_login_form: bool
    error_message: str
    created_at: int
    updated_at: int


class MessageResponse(BaseModel):
    message: str
    count: Optional[int] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_or_404(request: Request, url_id: int) -> UrlRecord:
    record = url_db.get_url(request.app.state.db, url_id)
    if record is None:
        raise HTTPException(status_code=404, detail="URL not found")
    return record


def _rerun(request: Request, url_id: int) -> Optional[UrlRecord]:
    record = url_db.reset_url(request.app.state.db, url_id)
    if record is not None:
        request.app.state.analysis.submit(record.address, record.id)
    return record


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=UrlResponse, status_code=201)
def create_url(body: UrlCreateRequest, request: Request) -> dict[str, Any]:
    """Store the URL as ``queued`` and start analysing it in the background."""
    record = url_db.create_url(request.app.state.db, str(body.url))
    request.app.state.analysis.submit(record.address, record.id)
    return record.to_dict()


@router.get("", response_model=list[UrlResponse])
def list_urls(request: Request, status: Optional[str] = None) -> list[dict[str, Any]]:
    return [r.to_dict() for r in url_db.list_urls(request.app.state.db, status=status)]


@router.post("/bulk-delete", response_model=MessageResponse)
def bulk_delete(body: IdsRequest, request: Request) -> dict[str, Any]:
    deleted = url_db.delete_urls(request.app.state.db, body.ids)
    return {"message": "URLs deleted successfully", "count": deleted}


@router.post("/bulk-rerun", response_model=MessageResponse)
def bulk_rerun(body: IdsRequest, request: Request) -> dict[str, Any]:
    """Re-queue every existing id; unknown ids are skipped."""
    queued = sum(1 for url_id in body.ids if _rerun(request, url_id) is not None)
    return {"message": "URLs queued for re-analysis", "count": queued}


@router.get("/{url_id}", response_model=UrlResponse)
def get_url(url_id: int, request: Request) -> dict[str, Any]:
    return _get_or_404(request, url_id).to_dict()


@router.delete("/{url_id}", response_model=MessageResponse)
def delete_url(url_id: int, request: Request) -> dict[str, Any]:
    if not url_db.delete_url(request.app.state.db, url_id):
        raise HTTPException(status_code=404, detail="URL not found")
    return {"message": "URL deleted successfully"}


@router.post("/{url_id}/analyze", response_model=MessageResponse)
def reanalyze_url(url_id: int, request: Request) -> dict[str, Any]:
    """Clear previous results and analyse the URL again."""
    if _rerun(request, url_id) is None:
        raise HTTPException(status_code=404, detail="URL not found")
    return {"message": "URL queued for re-analysis"}
