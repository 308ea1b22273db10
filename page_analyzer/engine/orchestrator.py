"""Analysis orchestration: sequences the engine stages for one URL.

Public API
----------
``Analyzer``        — runs one analysis synchronously and returns the result.
``AnalysisService`` — submits runs to a worker pool and hands back a
                      ``Future`` so completion is always observable.
``ResultStore``     — the persistence port an ``Analyzer`` writes through.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Hashable, Optional, Protocol

import httpx
from loguru import logger

from page_analyzer.config import settings
from page_analyzer.engine import links as link_classifier
from page_analyzer.engine import login, structure
from page_analyzer.engine.errors import AnalysisError, InvalidTransition
from page_analyzer.engine.fetcher import fetch
from page_analyzer.engine.models import AnalysisResult, AnalysisStatus, AnalysisTarget
from page_analyzer.engine.parser import parse
from page_analyzer.engine.prober import probe_all


class ResultStore(Protocol):
    """Persistence port.  Writes are last-write-wins per ``record_id``."""

    def save(self, record_id: Hashable, result: AnalysisResult) -> None: ...


# ---------------------------------------------------------------------------
# Run state machine
# ---------------------------------------------------------------------------

class AnalysisRun:
    """Lifecycle of a single run: ``queued -> running -> {done, error}``."""

    def __init__(self, url: str, record_id: Optional[Hashable] = None) -> None:
        self.url = url
        self.record_id = record_id
        self._result = AnalysisResult()

    @property
    def status(self) -> AnalysisStatus:
        return self._result.status

    @property
    def result(self) -> AnalysisResult:
        return self._result

    def _move(self, target: AnalysisStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidTransition(
                f"Cannot move run for {self.url!r} from {self.status.value} to {target.value}"
            )

    def start(self) -> None:
        self._move(AnalysisStatus.RUNNING)
        self._result = AnalysisResult.running()

    def update(self, **fields) -> None:
        if self.status is not AnalysisStatus.RUNNING:
            raise InvalidTransition(f"Run for {self.url!r} is not running")
        self._result = self._result.evolve(**fields)

    def finish(self) -> AnalysisResult:
        self._move(AnalysisStatus.DONE)
        self._result = self._result.evolve(status=AnalysisStatus.DONE)
        return self._result

    def fail(self, message: str) -> AnalysisResult:
        # No partial structural data survives a failed run.
        self._move(AnalysisStatus.ERROR)
        self._result = AnalysisResult(status=AnalysisStatus.ERROR, error_message=message)
        return self._result


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------

class Analyzer:
    """Runs the fetch → parse → analyze pipeline for one URL at a time.

    Args:
        store: Optional persistence port; receives the ``running`` value at
            start and the terminal value at the end of each run that was given
            a ``record_id``.
        client: Optional ``httpx.Client`` shared by the fetch and the probes.
    """

    def __init__(
        self,
        store: Optional[ResultStore] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.store = store
        self.client = client

    def _save(self, run: AnalysisRun) -> None:
        if self.store is not None and run.record_id is not None:
            self.store.save(run.record_id, run.result)

    def _execute(self, run: AnalysisRun) -> None:
        try:
            target = AnalysisTarget.from_url(run.url)
        except ValueError as exc:
            raise AnalysisError(run.url, str(exc)) from exc

        outcome = fetch(target.raw_url, client=self.client)
        if not outcome.ok:
            raise outcome.error  # type: ignore[misc]

        document = parse(outcome.body, outcome.content_type, url=target.raw_url)

        report = structure.analyze(document, outcome)
        run.update(
            html_version=report.html_version,
            title=report.title,
            headings=report.headings,
        )

        records = link_classifier.classify(document, target)
        internal, external = link_classifier.count_localities(records)
        broken = probe_all(records, client=self.client)
        run.update(internal_links=internal, external_links=external, broken_links=broken)

        run.update(has_login_form=login.detect(document))

    def run(self, url: str, record_id: Optional[Hashable] = None) -> AnalysisResult:
        """Analyze *url* and return the terminal :class:`AnalysisResult`.

        Fetch, status and parse failures end the run in ``error`` and are
        reported through ``error_message``.  Any other exception also ends the
        run in ``error`` before it propagates.
        """
        run = AnalysisRun(url, record_id)
        run.start()
        logger.info("Starting analysis for {} (record {})", url, record_id)

        try:
            self._save(run)
            self._execute(run)
        except AnalysisError as exc:
            run.fail(str(exc))
            logger.warning("Analysis failed for {}: {}", url, exc)
        except Exception as exc:
            run.fail(f"Unexpected error: {exc}")
            self._save(run)
            raise
        else:
            run.finish()
            result = run.result
            logger.info(
                "Completed analysis for {}: internal={} external={} broken={}",
                url,
                result.internal_links,
                result.external_links,
                result.broken_links,
            )

        self._save(run)
        return run.result


# ---------------------------------------------------------------------------
# Background service
# ---------------------------------------------------------------------------

class AnalysisService:
    """Runs analyses on a bounded worker pool and tracks them as futures.

    Callers may block on the returned ``Future`` or deliberately drop it; the
    service keeps its own reference until the run completes and logs any
    unexpected failure.
    """

    def __init__(self, analyzer: Analyzer, max_workers: Optional[int] = None) -> None:
        self.analyzer = analyzer
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers or settings.max_concurrent_runs,
            thread_name_prefix="analysis",
        )
        self._lock = threading.Lock()
        self._in_flight: dict[Future, Optional[Hashable]] = {}

    def submit(self, url: str, record_id: Optional[Hashable] = None) -> "Future[AnalysisResult]":
        future = self._pool.submit(self.analyzer.run, url, record_id)
        with self._lock:
            self._in_flight[future] = record_id
        future.add_done_callback(self._on_done)
        return future

    def _on_done(self, future: Future) -> None:
        with self._lock:
            record_id = self._in_flight.pop(future, None)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Analysis for record {} crashed", record_id)

    def pending(self) -> list[Optional[Hashable]]:
        """Record ids of runs that have not completed yet."""
        with self._lock:
            return list(self._in_flight.values())

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "AnalysisService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)
