"""Shared request dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException

from page_analyzer.config import settings


def require_token(authorization: Optional[str] = Header(default=None)) -> None:
    """Enforce ``Authorization: Bearer <API_TOKEN>`` when a token is configured."""
    if not settings.api_token:
        return
    if authorization != f"Bearer {settings.api_token}":
        raise HTTPException(status_code=401, detail="unauthorized")
