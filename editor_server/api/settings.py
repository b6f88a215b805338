"""Service configuration loaded from EDITOR_* environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from editor_server.api.models.enums import StorageBackend


class EditorSettings(BaseSettings):
    """Editor server settings.

    All fields are read from environment variables with the ``EDITOR_`` prefix.
    For example, ``EDITOR_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="EDITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging / error reporting ---------------------------------------------
    log_level: str = "INFO"

    mode: Literal["dev", "prod"] = "dev"
    """``prod`` forwards reported errors to the JSON error sink."""

    error_log: str | None = None
    """Path of the JSON-lines sink that receives forwarded error reports."""

    # -- Storage ---------------------------------------------------------------
    storage: StorageBackend = StorageBackend.LOCAL

    root_dir: str = "."
    """Repository root served by the local storage backend."""

    # S3 (only when storage = "s3")
    s3_endpoint: str | None = None
    s3_bucket: str | None = None
    s3_region: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    s3_path_style: bool = False
    """Use path-style addressing (required by MinIO and some S3-compatible services)."""

    s3_prefix: str | None = None
    """Key prefix under which the repository lives in the bucket."""

    # -- Editor ----------------------------------------------------------------
    upload_dir: str = "/static/uploads"
    """Repository directory that receives uploaded files."""

    partials_concurrency: int = Field(default=16, ge=1)
    """Maximum number of partial templates read at the same time."""

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 9090
    cors_origins: list[str] = Field(default_factory=lambda: ["https://editor.dev"])
    """Browser origins allowed to call the API (the editor UI runs elsewhere)."""


def get_settings() -> EditorSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to
    force a re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> EditorSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return EditorSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
