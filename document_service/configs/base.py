"""
Shared settings plumbing.

Every settings class reads the same .env file and ignores unknown keys;
env_config() builds that model config for a given variable prefix.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def env_config(prefix: str = "") -> SettingsConfigDict:
    """
    Model config for a settings class.

    Args:
        prefix: Environment variable prefix, e.g. "S3_DOCUMENTS_"

    Returns:
        SettingsConfigDict: Case-insensitive .env-backed config
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class ServiceSettings(BaseSettings):
    """Process-level settings of the document service."""

    model_config = env_config()

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = Field(
        default=False,
        description="Log request headers and multipart fields",
    )
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()
