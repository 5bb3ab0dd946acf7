"""
MedAI Backend — Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again during app startup.

Design Decision:
    We use pydantic-settings instead of raw os.getenv() because:
    1. Type coercion is automatic (str → int, str → bool)
    2. Validation happens at startup, not when the value is first used
    3. Documentation is embedded in the field definitions
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


# backend/data: the sample content shipped alongside the application package
DEFAULT_DATA_ROOT = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development. Attributes are
    grouped by concern for readability.
    """

    # ── Backing Store ─────────────────────────────────────────────────────
    # What: Directory holding the JSON collections (faculty/, research/, ...)
    # Layout: <data_root>/<collection>/sample.json, programs/applications.json
    data_root: str = Field(
        default=str(DEFAULT_DATA_ROOT),
        description="Root directory of the structured-data backing store",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Search ────────────────────────────────────────────────────────────
    # What: Seconds a materialized search index stays fresh before a lazy rebuild
    # Trade-off: Longer = fewer disk reads, but content edits surface later
    search_cache_ttl: int = Field(default=300, ge=0, le=86400)
    search_max_limit: int = Field(default=50, ge=1, le=500)
    search_min_query_length: int = Field(default=2, ge=1, le=20)

    # What: Cap on "related" items returned next to a detail record (news)
    related_items_limit: int = Field(default=3, ge=1, le=20)

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window applied to every API path
    rate_limit_requests: int = Field(default=300, ge=10, le=10000)
    rate_limit_window: int = Field(default=3600, ge=60, le=86400)  # seconds

    # What: Stricter window for contact form submissions (spam protection)
    contact_rate_limit_requests: int = Field(default=3, ge=1, le=100)
    contact_rate_limit_window: int = Field(default=900, ge=60, le=86400)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATA_ROOT and data_root both work
        "extra": "ignore",
    }

    @property
    def data_root_path(self) -> Path:
        return Path(self.data_root).resolve()

    def validate_data_root(self) -> None:
        """
        What:  Checks that the backing store directory exists and is readable.
        When:  Called during app startup (lifespan).
        How:   Raises ValueError with guidance; the caller logs and keeps serving
               so /health can report the problem.
        """
        root = self.data_root_path
        if not root.exists():
            raise ValueError(
                f"DATA_ROOT '{root}' does not exist. "
                "Point DATA_ROOT at the directory containing the content collections."
            )
        if not root.is_dir():
            raise ValueError(f"DATA_ROOT '{root}' is not a directory.")


# Singleton instance, imported throughout the application
settings = Settings()
