"""Primary HTTP fetch of the page under analysis."""

from __future__ import annotations

import threading
from typing import Optional

import httpx
from loguru import logger

from page_analyzer.config import settings
from page_analyzer.engine.errors import HTTPStatusError, TransportError
from page_analyzer.engine.models import FetchOutcome


def default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def request_with_deadline(
    client: httpx.Client, method: str, url: str, deadline: float
) -> httpx.Response:
    """Send a request that must complete, redirects and body included, within
    *deadline* seconds.

    httpx timeouts apply per connect/read/write operation, so a server that
    trickles bytes can keep a request alive indefinitely.  The request runs on
    a daemon thread that is abandoned once the deadline passes.

    Raises:
        httpx.TimeoutException: The deadline passed first.
        httpx.HTTPError: Whatever the request itself raised.
    """
    outcome: dict[str, object] = {}

    def send() -> None:
        try:
            outcome["response"] = client.request(method, url, timeout=deadline)
        except Exception as exc:
            outcome["error"] = exc

    worker = threading.Thread(target=send, name=f"{method} {url}", daemon=True)
    worker.start()
    worker.join(deadline)
    if worker.is_alive():
        raise httpx.TimeoutException(f"No complete response within {deadline}s")
    if "error" in outcome:
        raise outcome["error"]  # type: ignore[misc]
    return outcome["response"]  # type: ignore[return-value]


def _get(client: httpx.Client, url: str) -> FetchOutcome:
    try:
        response = request_with_deadline(client, "GET", url, settings.fetch_timeout)
    except httpx.TimeoutException as exc:
        return FetchOutcome(url=url, error=TransportError(url, f"Timed out: {exc}"))
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return FetchOutcome(url=url, error=TransportError(url, f"Request failed: {exc}"))

    if not response.is_success:
        return FetchOutcome(
            url=url,
            status_code=response.status_code,
            error=HTTPStatusError(url, response.status_code),
        )

    return FetchOutcome(
        url=url,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
        body=response.content,
    )


def fetch(url: str, client: Optional[httpx.Client] = None) -> FetchOutcome:
    """GET *url* and return a :class:`FetchOutcome`.

    Never raises for network or HTTP failures: a timeout, connection error or
    non-2xx status comes back as a failure outcome with an empty body.  The
    fetch is attempted exactly once.

    Args:
        url: Absolute ``http``/``https`` URL.
        client: Optional shared ``httpx.Client``; a short-lived one is opened
            when omitted.
    """
    if client is not None:
        outcome = _get(client, url)
    else:
        with httpx.Client(headers=default_headers(), follow_redirects=True) as own:
            outcome = _get(own, url)

    if outcome.ok:
        logger.debug("Fetched {} ({} bytes, {!r})", url, len(outcome.body), outcome.content_type)
    else:
        logger.warning("Fetch failed for {}: {}", url, outcome.error)
    return outcome
