"""HTML parsing: turns fetched bytes into a queryable :class:`ParsedDocument`."""

from __future__ import annotations

import codecs
from typing import Optional

from bs4 import BeautifulSoup, Tag

from page_analyzer.engine.errors import ParseError


def _declared_charset(content_type: str) -> Optional[str]:
    """Return the ``charset=`` parameter of a Content-Type header, if any."""
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip("\"'")
    return None


class ParsedDocument:
    """A lenient HTML tree owned by a single analysis run."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    def find_all(self, name: str) -> list[Tag]:
        return self._soup.find_all(name)

    def select(self, selector: str, scope: Optional[Tag] = None) -> list[Tag]:
        """CSS selector query, optionally scoped to a sub-element."""
        return (scope or self._soup).select(selector)

    def count(self, name: str) -> int:
        return len(self._soup.find_all(name))

    def first_text(self, name: str) -> str:
        """Stripped text of the first *name* element, or ``""``."""
        element = self._soup.find(name)
        if element is None:
            return ""
        return element.get_text().strip()

    @staticmethod
    def attr(element: Tag, name: str) -> str:
        """Attribute value as a string (multi-valued attributes are joined)."""
        value = element.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)


def parse(body: bytes, content_type: str = "", url: str = "") -> ParsedDocument:
    """Parse *body* into a :class:`ParsedDocument`.

    Missing or implicit closing tags are tolerated (``html.parser`` backend).
    When the Content-Type declares a charset the body must decode with it;
    otherwise BeautifulSoup sniffs the encoding itself.

    Raises:
        ParseError: Empty body, unknown charset, or undecodable bytes.
    """
    if not body or not body.strip():
        raise ParseError(url, "Empty response body")

    charset = _declared_charset(content_type)
    markup: str | bytes = body
    if charset:
        try:
            codecs.lookup(charset)
            markup = body.decode(charset)
        except LookupError as exc:
            raise ParseError(url, f"Unknown charset {charset!r}") from exc
        except UnicodeDecodeError as exc:
            raise ParseError(url, f"Body is not valid {charset}: {exc.reason}") from exc

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except Exception as exc:  # html.parser raises assorted errors on garbage input
        raise ParseError(url, f"Could not build document tree: {exc}") from exc
    return ParsedDocument(soup)
