"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started locally without any configuration.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Library API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None
    # Level of the per-request access log; empty means same as log_level.
    access_log_level: Optional[str] = os.getenv("ACCESS_LOG_LEVEL") or None

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``.  ``:memory:`` cannot be
    # used because every repository call opens its own connection.
    database_url: str = os.getenv("DATABASE_URL", "library.db")

    # Comma‑separated list of origins allowed by the CORS middleware.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    def allowed_origins(self) -> List[str]:
        """Return ``cors_origins`` split into a list, ignoring blanks."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()
