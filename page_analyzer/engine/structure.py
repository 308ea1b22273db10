"""Heading counts, page title and HTML version label."""

from __future__ import annotations

from page_analyzer.engine.models import FetchOutcome, HeadingCounts, StructureReport
from page_analyzer.engine.parser import ParsedDocument

HEADING_LEVELS = range(1, 7)


def html_version(content_type: str) -> str:
    """Coarse label derived from the Content-Type header only."""
    return "HTML5" if "html" in content_type.lower() else "Unknown"


def count_headings(document: ParsedDocument) -> HeadingCounts:
    # Flat count: nested headings are counted like any other.
    return HeadingCounts(**{f"h{level}": document.count(f"h{level}") for level in HEADING_LEVELS})


def analyze(document: ParsedDocument, outcome: FetchOutcome) -> StructureReport:
    return StructureReport(
        html_version=html_version(outcome.content_type),
        title=document.first_text("title"),
        headings=count_headings(document),
    )
