"""Shared configuration management for the remittance schedule builder.

Based on Pydantic Settings v2 best practices:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Receipts above this size are rejected before any extraction call
DEFAULT_MAX_DOCUMENT_BYTES = 19 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Example: APP_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Service configuration
    service_name: str = Field(
        default="remittance-schedule",
        description="Service identifier for metrics and logs",
    )
    service_version: str = Field(
        default="0.1.0",
        description="Service version",
    )

    # Extraction provider configuration
    extraction_provider: Literal["openai"] = Field(
        default="openai",
        description="Extraction provider: openai (cloud vision model)",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Vision-capable OpenAI model used to read receipts",
    )
    extraction_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound for a single extraction call",
    )
    extraction_max_attempts: int = Field(
        default=1,
        ge=1,
        description="Transport attempts per document (1 = no retries)",
    )
    extraction_max_concurrency: int = Field(
        default=1,
        ge=1,
        description="Extraction calls allowed in flight; results are still consumed in order",
    )

    # Intake limits
    max_document_bytes: int = Field(
        default=DEFAULT_MAX_DOCUMENT_BYTES,
        gt=0,
        description="Largest accepted receipt file in bytes",
    )

    # Export configuration
    output_dir: str = Field(
        default=".",
        description="Directory the CLI writes schedules into",
    )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
