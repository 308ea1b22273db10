"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class UrlRecord:
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

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
