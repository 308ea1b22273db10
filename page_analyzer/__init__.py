"""Web page analyzer: fetch a page and report its structure, links and login forms."""

__version__ = "0.1.0"
