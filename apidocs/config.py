# =============================================================================
# Application Configuration — Pydantic Settings
# =============================================================================
#
# Settings are loaded in this priority order (highest first):
#   1. Environment variables (e.g., `DOCS_BASE_PATH=...`)
#   2. Values from the .env file
#   3. Default values defined below
#
# USAGE:
#   from apidocs.config import get_settings
#   print(get_settings().docs_route_prefix)
#
#   from apidocs.config import settings
#   print(settings.app_name)
# =============================================================================

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults serve the documentation UI at the site root and look for
    XML comment files in the current working directory.
    """

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    app_name: str = "Versioned API Docs"
    app_version: str = "0.1.0"
    debug: bool = True
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # Documentation Info
    # -------------------------------------------------------------------------
    # Base template handed to configure_documentation(). Each API version
    # gets its own copy with the version string filled in.
    # -------------------------------------------------------------------------
    docs_title: str = "Versioned API"
    docs_description: str = "HTTP API documentation."

    # -------------------------------------------------------------------------
    # Auxiliary Comment Files
    # -------------------------------------------------------------------------
    # Directory scanned at startup for XML comment files. None means the
    # current working directory. A missing directory aborts startup.
    # -------------------------------------------------------------------------
    docs_base_path: str | None = None
    docs_comment_pattern: str = "*.xml"

    # -------------------------------------------------------------------------
    # Documentation UI
    # -------------------------------------------------------------------------
    # Empty prefix serves Swagger UI at "/".
    # -------------------------------------------------------------------------
    docs_route_prefix: str = ""
    docs_use_validation_rules: bool = False

    # -------------------------------------------------------------------------
    # Operation Metadata
    # -------------------------------------------------------------------------
    # Header documented on every response. Empty string disables it.
    # -------------------------------------------------------------------------
    correlation_header: str = "X-Correlation-ID"

    # -------------------------------------------------------------------------
    # Versioning
    # -------------------------------------------------------------------------
    # Group names (e.g. "v1") reported as deprecated even when their routes
    # are not marked deprecated individually.
    # -------------------------------------------------------------------------
    deprecated_versions: list[str] = []

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache a Settings instance.

    Call get_settings.cache_clear() to pick up changed environment values
    before rebuilding the documentation.
    """
    return Settings()


# ---------------------------------------------------------------------------
# Module-level convenience instance
# ---------------------------------------------------------------------------
# Reads the environment once at import. Prefer get_settings() where a test
# may need to swap the values.
# ---------------------------------------------------------------------------
settings = Settings()
