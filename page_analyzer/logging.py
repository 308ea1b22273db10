"""Loguru sink configuration shared by the CLI and the API."""

from __future__ import annotations

import sys

from loguru import logger

from page_analyzer.config import settings

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default handler with a single stderr sink."""
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.log_level).upper(), format=_FORMAT)
