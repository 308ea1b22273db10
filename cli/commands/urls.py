"""Commands for stored URL records."""

from __future__ import annotations

from typing import Optional

import typer

from cli.rendering import format_record, format_summary
from page_analyzer.db import SqliteResultStore, get_connection, init_db
from page_analyzer.db import urls as url_db
from page_analyzer.engine import Analyzer

urls_app = typer.Typer(help="Store, list and re-run analysed URLs.", no_args_is_help=True)


@urls_app.command("add")
def urls_add(url: str = typer.Argument(..., help="Absolute http(s) URL.")) -> None:
    """Store a URL, analyse it and print the stored record."""
    conn = get_connection()
    init_db(conn)
    try:
        record = url_db.create_url(conn, url)
        typer.echo(f"Analysing [{record.id}] {url} …")
        Analyzer(store=SqliteResultStore(conn)).run(url, record_id=record.id)
        typer.echo(format_record(url_db.get_url(conn, record.id)))
    finally:
        conn.close()


@urls_app.command("list")
def urls_list(
    status: Optional[str] = typer.Option(None, help="Filter by status (queued, running, done, error)."),
) -> None:
    """List stored URLs, newest first."""
    conn = get_connection()
    init_db(conn)
    records = url_db.list_urls(conn, status=status)
    conn.close()
    if not records:
        typer.echo("No URLs found.")
        return
    for record in records:
        typer.echo(format_summary(record))


@urls_app.command("show")
def urls_show(url_id: int = typer.Argument(..., help="Record id.")) -> None:
    """Show the full analysis of one stored URL."""
    conn = get_connection()
    init_db(conn)
    record = url_db.get_url(conn, url_id)
    conn.close()
    if record is None:
        typer.echo(f"URL {url_id} not found.")
        raise typer.Exit(code=1)
    typer.echo(format_record(record))


@urls_app.command("delete")
def urls_delete(url_id: int = typer.Argument(..., help="Record id.")) -> None:
    """Delete a stored URL."""
    conn = get_connection()
    init_db(conn)
    deleted = url_db.delete_url(conn, url_id)
    conn.close()
    if not deleted:
        typer.echo(f"URL {url_id} not found.")
        raise typer.Exit(code=1)
    typer.echo(f"Deleted URL {url_id}.")


@urls_app.command("rerun")
def urls_rerun(url_id: int = typer.Argument(..., help="Record id.")) -> None:
    """Clear a stored URL's results and analyse it again."""
    conn = get_connection()
    init_db(conn)
    try:
        record = url_db.reset_url(conn, url_id)
        if record is None:
            typer.echo(f"URL {url_id} not found.")
            raise typer.Exit(code=1)
        Analyzer(store=SqliteResultStore(conn)).run(record.address, record_id=record.id)
        typer.echo(format_record(url_db.get_url(conn, record.id)))
    finally:
        conn.close()
