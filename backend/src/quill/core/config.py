"""Configuration management for the Quill settings backend.

Uses Pydantic Settings for type-safe, environment-based configuration.
"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
# Use override=True to ensure .env changes take effect immediately
load_dotenv(override=True)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App configuration
    app_name: str = Field("Quill", alias="QUILL_APP_NAME")
    debug: bool = Field(False, alias="QUILL_DEBUG")
    version: str = Field("0.0.0-dev", alias="QUILL_APP_VERSION")
    environment: str = Field("development", alias="QUILL_ENVIRONMENT")

    # Database configuration
    database_url: str = Field(alias="QUILL_DATABASE_URL")
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600

    # Logging configuration
    log_level: str = Field("INFO", alias="QUILL_LOG_LEVEL")
    log_format: str = Field("text", alias="QUILL_LOG_FORMAT")  # text or json

    # Themes: installed theme packages are discovered here for availableThemes
    themes_dir: str = Field("./content/themes", alias="QUILL_THEMES_DIR")

    # Localisation of error messages
    default_locale: str = Field("en", alias="QUILL_DEFAULT_LOCALE")

    # Populate the settings cache from the store at startup
    settings_preload: bool = Field(True, alias="QUILL_SETTINGS_PRELOAD")

    @staticmethod
    def _repo_root_from_this_file() -> Path:
        """Resolve repository root for both local and container layouts.

        - Local dev: <repo>/backend/src/quill/core/config.py -> repo root = <repo>
        - Container: /app/src/quill/core/config.py -> repo root = /app
        """
        here = Path(__file__).resolve()
        src_dir = here.parents[2]  # .../src
        candidate_parent = src_dir.parent
        return candidate_parent.parent if candidate_parent.name == "backend" else candidate_parent

    @field_validator("themes_dir", mode="before")
    @classmethod
    def _resolve_themes_dir(cls, v: str) -> str:
        p = Path(v)
        if p.is_absolute():
            return str(p)
        return str((cls._repo_root_from_this_file() / p).resolve())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment setting."""
        valid_environments = ["development", "staging", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Build a settings instance from the environment."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance - will be created when first accessed
settings = None


def get_settings_instance() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global settings  # noqa: PLW0603
    if settings is None:
        settings = get_settings()
    return settings
