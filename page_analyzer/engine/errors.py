"""Error kinds raised (or recorded) by the analysis engine.

``TransportError``, ``HTTPStatusError`` and ``ParseError`` are fatal to a run
and end it in the ``error`` state.  ``LinkProbeError`` only ever marks a
single link as broken.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every engine error."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} ({self.url})"


class TransportError(AnalysisError):
    """DNS, connection or timeout failure on the primary fetch."""


class HTTPStatusError(AnalysisError):
    """The primary fetch returned a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"Unexpected HTTP status {status_code}")
        self.status_code = status_code


class ParseError(AnalysisError):
    """The fetched body could not be turned into a document tree."""


class LinkProbeError(AnalysisError):
    """A single link probe failed; counted as broken, never fatal."""


class InvalidTransition(RuntimeError):
    """An analysis run was moved along a status edge that does not exist."""
