"""Concurrent broken-link detection.

Every link gets its own HEAD request on its own worker thread; there is no
cap on the fan-out beyond the number of links on the page.  Each probe is
bounded only by ``settings.probe_timeout``, a deadline for the whole
request including redirects.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional, Sequence

import httpx
from loguru import logger

from page_analyzer.config import settings
from page_analyzer.engine.errors import LinkProbeError
from page_analyzer.engine.fetcher import default_headers, request_with_deadline
from page_analyzer.engine.models import LinkRecord


class BrokenLinkCounter:
    """Lock-guarded accumulator shared by all probe threads of one run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> None:
        with self._lock:
            self._value += 1

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def check(url: str, client: httpx.Client) -> None:
    """HEAD *url*.

    Raises:
        LinkProbeError: On any transport failure or a status code >= 400.
    """
    try:
        response = request_with_deadline(client, "HEAD", url, settings.probe_timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise LinkProbeError(url, f"{type(exc).__name__}: {exc}") from exc
    if response.status_code >= 400:
        raise LinkProbeError(url, f"HTTP {response.status_code}")


def probe(url: str, client: httpx.Client) -> bool:
    """Return ``True`` if *url* is broken."""
    try:
        check(url, client)
    except LinkProbeError as exc:
        logger.debug("Broken link: {}", exc)
        return True
    return False


def _probe_into(url: str, client: httpx.Client, counter: BrokenLinkCounter) -> None:
    if probe(url, client):
        counter.increment()


def probe_all(
    links: Sequence[LinkRecord],
    client: Optional[httpx.Client] = None,
) -> int:
    """Probe every link concurrently and return the broken-link count.

    Blocks until every probe has finished or timed out.  Failures never
    propagate; a failing probe only marks its own link as broken.
    """
    if not links:
        return 0

    counter = BrokenLinkCounter()
    own_client = client is None
    if own_client:
        client = httpx.Client(
            headers=default_headers(),
            follow_redirects=True,
            limits=httpx.Limits(max_connections=None, max_keepalive_connections=None),
        )

    try:
        with ThreadPoolExecutor(max_workers=len(links)) as pool:
            futures = [
                pool.submit(_probe_into, link.url, client, counter) for link in links
            ]
            wait(futures)
            for future in futures:
                # Surfaces programming errors; probe() itself never raises.
                future.result()
    finally:
        if own_client:
            client.close()

    broken = counter.value
    logger.debug("Probed {} link(s), {} broken", len(links), broken)
    return broken
