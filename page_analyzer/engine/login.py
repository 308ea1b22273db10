"""Heuristic login-form detection."""

from __future__ import annotations

from bs4 import Tag

from page_analyzer.engine.parser import ParsedDocument

LOGIN_KEYWORDS: frozenset[str] = frozenset(
    {
        "login",
        "username",
        "email",
        "user",
        "password",
        "pass",
        "signin",
        "auth",
        "credential",
    }
)

_INSPECTED_ATTRIBUTES = ("name", "id", "placeholder")


def _has_password_input(document: ParsedDocument, form: Tag) -> bool:
    return bool(document.select('input[type="password" i]', scope=form))


def _looks_like_login_field(field: Tag) -> bool:
    for attribute in _INSPECTED_ATTRIBUTES:
        value = ParsedDocument.attr(field, attribute).lower()
        if value and any(keyword in value for keyword in LOGIN_KEYWORDS):
            return True
    return False


def is_login_form(document: ParsedDocument, form: Tag) -> bool:
    """A password field, or any input whose name/id/placeholder hints at login."""
    if _has_password_input(document, form):
        return True
    return any(_looks_like_login_field(field) for field in form.find_all("input"))


def detect(document: ParsedDocument) -> bool:
    """Return ``True`` if any ``<form>`` on the page qualifies as a login form."""
    return any(is_login_form(document, form) for form in document.find_all("form"))
