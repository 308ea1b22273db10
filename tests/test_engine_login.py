"""Tests for heuristic login-form detection."""

from __future__ import annotations

import pytest

from page_analyzer.engine.login import LOGIN_KEYWORDS, detect
from page_analyzer.engine.parser import parse


def _detect(html: str) -> bool:
    return detect(parse(html.encode()))


class TestDetect:
    def test_password_input(self) -> None:
        assert _detect('<form><input type="password"></form>') is True

    def test_password_type_case_insensitive(self) -> None:
        assert _detect('<form><input type="PassWord"></form>') is True

    def test_search_only_form(self) -> None:
        assert _detect('<form><input name="search"></form>') is False

    def test_no_forms(self) -> None:
        assert _detect("<p>Nothing to see</p>") is False

    def test_password_outside_form_ignored(self) -> None:
        assert _detect('<input type="password"><form><input name="q"></form>') is False

    @pytest.mark.parametrize("attribute", ["name", "id", "placeholder"])
    def test_keyword_in_each_attribute(self, attribute: str) -> None:
        assert _detect(f'<form><input {attribute}="Your Email"></form>') is True

    @pytest.mark.parametrize("keyword", sorted(LOGIN_KEYWORDS))
    def test_every_keyword(self, keyword: str) -> None:
        assert _detect(f'<form><input name="x-{keyword.upper()}-y"></form>') is True

    def test_substring_match(self) -> None:
        # "user" matches inside "username_field", "auth" inside "oauth_token".
        assert _detect('<form><input id="oauth_token"></form>') is True

    def test_any_form_qualifies(self) -> None:
        html = (
            '<form><input name="q"></form>'
            '<form><input name="newsletter"></form>'
            '<form><input name="login_id"></form>'
        )
        assert _detect(html) is True

    def test_non_login_forms(self) -> None:
        html = '<form><input name="q" placeholder="Search"></form><form><textarea name="comment"></textarea></form>'
        assert _detect(html) is False

    def test_implicitly_closed_form(self) -> None:
        assert _detect('<div><form><input type="password"></div>') is True
