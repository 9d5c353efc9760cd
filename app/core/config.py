"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. DATABASE_URL and SECRET_KEY are checked where they
are used (database session, token verification) so the storage and import
components can be built without them.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "debt-cases"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = ""
    database_echo: bool = False
    # Create tables on startup (development only; no migrations)
    database_auto_create: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Storage
    storage_root: str = "./storage"
    staging_dir_name: str = "temp"
    max_upload_size: int = 50 * 1024 * 1024  # 50MB
    # Byte cap for one sanitized path segment (most filesystems allow 255)
    max_segment_bytes: int = 180

    # Import
    max_import_size: int = 20 * 1024 * 1024  # 20MB

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Validate storage settings.

        - STORAGE_ROOT must be non-empty.
        - STAGING_DIR_NAME must be a single plain folder name.
        - MAX_SEGMENT_BYTES must be between 16 and 255.
        """
        if not self.storage_root.strip():
            raise ValueError("STORAGE_ROOT must not be empty.")
        name = self.staging_dir_name.strip()
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(
                f"STAGING_DIR_NAME must be a single folder name, got: {self.staging_dir_name!r}"
            )
        if not 16 <= self.max_segment_bytes <= 255:
            raise ValueError(
                f"MAX_SEGMENT_BYTES must be between 16 and 255, got: {self.max_segment_bytes}"
            )
        if self.max_upload_size <= 0 or self.max_import_size <= 0:
            raise ValueError("MAX_UPLOAD_SIZE and MAX_IMPORT_SIZE must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
