"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from pathlib import Path
from typing import Any, Optional

from pydantic_settings import BaseSettings
from pydantic import Field, validator

DEFAULT_COMMA_AS_DECIMAL = False
DEFAULT_JOURNAL_SEPARATOR = "-"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Accounting Journal Renderer", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Rendering defaults, overridable per document through frontmatter
    comma_as_decimal: bool = Field(default=DEFAULT_COMMA_AS_DECIMAL, alias="COMMA_AS_DECIMAL")
    journal_separator: str = Field(default=DEFAULT_JOURNAL_SEPARATOR, alias="JOURNAL_SEPARATOR")
    account_equivalence_path: Optional[str] = Field(default=None, alias="ACCOUNT_EQUIVALENCE_PATH")

    # Storage
    documents_root: str = Field(default=".", alias="DOCUMENTS_ROOT")
    export_path: str = Field(default="files", alias="EXPORT_PATH")

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @validator("port")
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @validator("account_equivalence_path")
    def validate_account_equivalence_path(cls, v):
        """Treat a blank path as no path."""
        if v is not None and not v.strip():
            return None
        return v

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.export_path).mkdir(parents=True, exist_ok=True)


def resolve_option(*candidates: Any, default: Any) -> Any:
    """
    Return the first candidate that is not None, else the default.

    Candidates are given in priority order, e.g.
    ``resolve_option(document_override, global_setting, default=builtin)``.
    """
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
