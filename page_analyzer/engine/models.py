"""Data models for the analysis pipeline.

Everything that leaves a run is a frozen dataclass; new values are derived
with :func:`dataclasses.replace` instead of being mutated in place.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlsplit


class AnalysisStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (AnalysisStatus.DONE, AnalysisStatus.ERROR)

    def can_transition_to(self, target: "AnalysisStatus") -> bool:
        """Return ``True`` if ``self -> target`` is an edge of the run lifecycle."""
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[AnalysisStatus, frozenset[AnalysisStatus]] = {
    AnalysisStatus.QUEUED: frozenset({AnalysisStatus.RUNNING}),
    AnalysisStatus.RUNNING: frozenset({AnalysisStatus.DONE, AnalysisStatus.ERROR}),
    AnalysisStatus.DONE: frozenset(),
    AnalysisStatus.ERROR: frozenset(),
}


@dataclass(frozen=True)
class AnalysisTarget:
    """The submitted URL and its parsed base form."""

    raw_url: str
    scheme: str
    host: str
    path: str

    @classmethod
    def from_url(cls, url: str) -> "AnalysisTarget":
        """Parse *url*; the scheme is never defaulted.

        Raises:
            ValueError: If *url* is not an absolute ``http``/``https`` URL.
        """
        parts = urlsplit(url.strip())
        if parts.scheme.lower() not in ("http", "https"):
            raise ValueError(f"URL must start with http:// or https://: {url!r}")
        if not parts.hostname:
            raise ValueError(f"URL has no host: {url!r}")
        return cls(
            raw_url=url.strip(),
            scheme=parts.scheme.lower(),
            host=parts.netloc.rpartition("@")[2].lower(),
            path=parts.path or "/",
        )


@dataclass(frozen=True)
class FetchOutcome:
    """Result of the primary GET: either a response or a failure."""

    url: str
    status_code: Optional[int] = None
    content_type: str = ""
    body: bytes = b""
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class LinkRecord:
    """One anchor occurrence, resolved to an absolute URL."""

    url: str
    internal: bool

    @property
    def locality(self) -> str:
        return "internal" if self.internal else "external"


@dataclass(frozen=True)
class HeadingCounts:
    h1: int = 0
    h2: int = 0
    h3: int = 0
    h4: int = 0
    h5: int = 0
    h6: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class StructureReport:
    html_version: str
    title: str
    headings: HeadingCounts


@dataclass(frozen=True)
class AnalysisResult:
    """Terminal output of one analysis run.

    This is the only value handed to the persistence collaborator; use
    :meth:`as_record` for its flat column form.
    """

    status: AnalysisStatus = AnalysisStatus.QUEUED
    html_version: str = ""
    title: str = ""
    headings: HeadingCounts = field(default_factory=HeadingCounts)
    internal_links: int = 0
    external_links: int = 0
    broken_links: int = 0
    has_login_form: bool = False
    error_message: str = ""

    @classmethod
    def running(cls) -> "AnalysisResult":
        """The empty value a run starts from."""
        return cls(status=AnalysisStatus.RUNNING)

    def evolve(self, **changes: Any) -> "AnalysisResult":
        return replace(self, **changes)

    def as_record(self) -> dict[str, Any]:
        """Flatten into the persisted field set (h1..h6 as top-level keys)."""
        return {
            "status": self.status.value,
            "html_version": self.html_version,
            "title": self.title,
            **self.headings.as_dict(),
            "internal_links": self.internal_links,
            "external_links": self.external_links,
            "broken_links": self.broken_links,
            "has_login_form": self.has_login_form,
            "error_message": self.error_message,
        }
