"""Centralised settings for the web page analyzer.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("ANALYZER_WORKSPACE", Path.home() / ".webpage_analyzer")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "analyzer.db"

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "10.0"))
    )
    probe_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PROBE_TIMEOUT", "5.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "ANALYZER_USER_AGENT", "Mozilla/5.0 (compatible; WebpageAnalyzer/1.0)"
        )
    )
    max_concurrent_runs: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_RUNS", "4"))
    )

    # ------------------------------------------------------------------
    # HTTP API
    # ------------------------------------------------------------------
    api_token: str = field(default_factory=lambda: os.environ.get("API_TOKEN", ""))
    cors_origins: list[str] = field(
        default_factory=lambda: _split_csv(os.environ.get("CORS_ORIGINS", "*"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from page_analyzer.config import settings
settings = Settings()
