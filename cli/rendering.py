"""Plain-text formatting for analysis results and stored records."""

from __future__ import annotations

from typing import Any

from page_analyzer.db.models import UrlRecord
from page_analyzer.engine.models import AnalysisResult


def _lines(fields: dict[str, Any]) -> list[str]:
    headings = "  ".join(f"h{i}={fields[f'h{i}']}" for i in range(1, 7))
    lines = [
        f"  status:         {fields['status']}",
        f"  title:          {fields['title']!r}",
        f"  html version:   {fields['html_version'] or '-'}",
        f"  headings:       {headings}",
        f"  links:          internal={fields['internal_links']}  "
        f"external={fields['external_links']}  broken={fields['broken_links']}",
        f"  login form:     {'yes' if fields['has_login_form'] else 'no'}",
    ]
    if fields.get("error_message"):
        lines.append(f"  error:          {fields['error_message']}")
    return lines


def format_result(url: str, result: AnalysisResult) -> str:
    return "\n".join([url, *_lines(result.as_record())])


def format_record(record: UrlRecord) -> str:
    return "\n".join([f"[{record.id}] {record.address}", *_lines(record.to_dict())])


def format_summary(record: UrlRecord) -> str:
    """One-line listing entry."""
    return (
        f"  {record.id:>4}  [{record.status:<7}]  {record.address}  "
        f"{record.title[:40]!r}"
    )
