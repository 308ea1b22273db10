"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from page_analyzer.api import app

    uvicorn page_analyzer.api:app --reload
"""

from page_analyzer.api.app import app

__all__ = ["app"]
