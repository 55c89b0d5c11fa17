"""Configuration loaded from COMPOSER_WORKSPACES_* environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkspacesSettings(BaseSettings):
    """composer-workspaces settings.

    All fields are read from environment variables with the
    ``COMPOSER_WORKSPACES_`` prefix.  For example,
    ``COMPOSER_WORKSPACES_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPOSER_WORKSPACES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Filesystem layout -----------------------------------------------------
    manifest_filename: str = "composer.json"
    """Manifest file looked up in the root and in every glob match."""

    vendor_dirname: str = "vendor"
    """Dependency-installation directory, shared at the root and linked in members."""

    # -- Reconciliation --------------------------------------------------------
    json_indent: int = Field(default=4, ge=0)
    """Indentation of the rewritten root manifest (matches PHP pretty-printing)."""

    # -- Discovery -------------------------------------------------------------
    fail_on_duplicate_names: bool = False
    """Raise instead of warning when two workspaces declare the same name.

    By default the later-scanned workspace wins.
    """


def get_settings() -> WorkspacesSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> WorkspacesSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return WorkspacesSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
get_settings.cache_clear = _get_settings_cached.cache_clear  # type: ignore[attr-defined]
