"""Webpage analyzer CLI entry-point for all operations.

Usage:
    webpage-analyzer --help

Sub-commands:
    analyze   → run one analysis and print the result
    urls      → stored URL records (add, list, show, delete, rerun)
    db        → database maintenance
    serve     → run the HTTP API
"""

from __future__ import annotations

import json

import typer

from cli.commands.urls import urls_app
from cli.rendering import format_result
from page_analyzer.config import settings
from page_analyzer.db import SqliteResultStore, get_connection, init_db
from page_analyzer.db import urls as url_db
from page_analyzer.engine import AnalysisStatus, Analyzer
from page_analyzer.logging import configure_logging

app = typer.Typer(
    name="webpage-analyzer",
    help="Analyse web pages: headings, links, broken links and login forms.",
    no_args_is_help=True,
)
app.add_typer(urls_app, name="urls")

db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Loguru log level."),
) -> None:
    configure_logging(log_level)


@app.command("analyze")
def analyze(
    url: str = typer.Argument(..., help="Absolute http(s) URL to analyse."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    save: bool = typer.Option(False, "--save", help="Store the URL and its result in the database."),
) -> None:
    """Analyse URL, optionally storing it as a new record."""
    record_id = None
    if save:
        conn = get_connection()
        init_db(conn)
        try:
            record_id = url_db.create_url(conn, url).id
            result = Analyzer(store=SqliteResultStore(conn)).run(url, record_id=record_id)
        finally:
            conn.close()
    else:
        result = Analyzer().run(url)

    if as_json:
        payload = {"url": url, **result.as_record()}
        if record_id is not None:
            payload["id"] = record_id
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(format_result(url, result))
    if result.status is AnalysisStatus.ERROR:
        raise typer.Exit(code=1)


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8080, help="Bind port."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the HTTP API under uvicorn."""
    import uvicorn

    uvicorn.run("page_analyzer.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
