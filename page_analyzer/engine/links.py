"""Anchor extraction and internal/external classification."""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit

from loguru import logger

from page_analyzer.engine.models import AnalysisTarget, LinkRecord
from page_analyzer.engine.parser import ParsedDocument


def _host(url: str) -> str:
    """Lower-cased ``host[:port]`` of *url*, without any userinfo."""
    return urlsplit(url).netloc.rpartition("@")[2].lower()


def resolve(href: str, base_url: str) -> str:
    """Resolve *href* against *base_url* (RFC 3986).

    Absolute hrefs come back unchanged.

    Raises:
        ValueError: If *href* cannot be parsed as a URL.
    """
    parts = urlsplit(href)
    # urlsplit is lenient about brackets in the host; force port validation too.
    _ = parts.port
    if parts.scheme:
        return href
    return urljoin(base_url, href)


def classify(document: ParsedDocument, base: AnalysisTarget) -> list[LinkRecord]:
    """Return one :class:`LinkRecord` per ``<a>`` whose ``href`` is not ``""``.

    Anchors are not de-duplicated: two anchors pointing at the same URL yield
    two records.  Hrefs that fail to parse are skipped.
    """
    records: list[LinkRecord] = []
    for anchor in document.find_all("a"):
        href = ParsedDocument.attr(anchor, "href")
        if not href:
            continue
        try:
            # A whitespace-only href is a reference to the page itself.
            absolute = resolve(href.strip(), base.raw_url)
            host = _host(absolute)
        except ValueError as exc:
            logger.debug("Skipping unparseable href {!r}: {}", href, exc)
            continue
        records.append(LinkRecord(url=absolute, internal=host == base.host))
    return records


def count_localities(links: list[LinkRecord]) -> tuple[int, int]:
    """Return ``(internal, external)`` counts."""
    internal = sum(1 for link in links if link.internal)
    return internal, len(links) - internal
