"""
Centralized configuration management for formhook.
"""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FormhookConfig(BaseSettings):
    """Main configuration for the send data handler."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Transport Configuration
    request_timeout: float = Field(
        default=10.0, validation_alias="FORMHOOK_REQUEST_TIMEOUT"
    )
    merge_url_query_into_body: bool = Field(
        default=True, validation_alias="FORMHOOK_MERGE_URL_QUERY_INTO_BODY"
    )

    # Callback Plugins (os.pathsep separated directories)
    plugin_dirs: str = Field(default="", validation_alias="FORMHOOK_PLUGIN_DIRS")

    # Logging Configuration
    log_level: str = Field(default="WARNING", validation_alias="FORMHOOK_LOG_LEVEL")
    log_format: str = Field(default="console", validation_alias="FORMHOOK_LOG_FORMAT")

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = {"console", "json"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def plugin_dir_paths(self) -> List[Path]:
        """Return the configured callback plugin directories."""
        return [Path(p).expanduser() for p in self.plugin_dirs.split(os.pathsep) if p]


# Global config instance
_config: Optional[FormhookConfig] = None


def get_config() -> FormhookConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = FormhookConfig()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
