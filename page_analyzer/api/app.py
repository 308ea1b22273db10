"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``), initialises the schema and starts an
:class:`~page_analyzer.engine.AnalysisService` whose analyzer writes results
back through a :class:`~page_analyzer.db.SqliteResultStore`.  On shutdown it
waits for in-flight analyses, then closes the connection.

Routers
-------
    /api/urls  — submit, list, inspect, delete and re-run analyses
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from page_analyzer import __version__
from page_analyzer.api.deps import require_token
from page_analyzer.api.routers import urls as urls_router
from page_analyzer.config import settings
from page_analyzer.db import SqliteResultStore, get_connection, init_db
from page_analyzer.engine import AnalysisService, Analyzer
from page_analyzer.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB and the analysis pool on startup; drain both on shutdown."""
    configure_logging()
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    app.state.analysis = AnalysisService(Analyzer(store=SqliteResultStore(conn)))
    try:
        yield
    finally:
        app.state.analysis.shutdown(wait=True)
        conn.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Webpage Analyzer API",
        description=(
            "Submit a URL for analysis and read back its HTML version, title, "
            "heading counts, internal/external/broken link counts and whether "
            "it contains a login form."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(
        urls_router.router,
        prefix="/api/urls",
        tags=["urls"],
        dependencies=[Depends(require_token)],
    )

    return app


# Module-level instance used by uvicorn:
#   uvicorn page_analyzer.api.app:app --reload
app = create_app()
