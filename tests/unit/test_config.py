"""Unit tests for configuration management."""

import os
from collections.abc import Generator

import pytest
from pydantic import ValidationError

from remittance.shared.config import DEFAULT_MAX_DOCUMENT_BYTES, Settings, get_settings


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before and after test."""
    original_env = dict(os.environ)
    env_vars = [k for k in os.environ if k.startswith("APP_")]
    for var in env_vars:
        del os.environ[var]
    yield
    os.environ.clear()
    os.environ.update(original_env)


def test_settings_defaults(clean_env: None) -> None:
    """Test that settings have correct default values."""
    settings = Settings(_env_file=None)

    assert settings.environment == "development"
    assert settings.log_level == "INFO"
    assert settings.service_name == "remittance-schedule"
    assert settings.extraction_provider == "openai"
    assert settings.extraction_max_attempts == 1
    assert settings.extraction_max_concurrency == 1
    assert settings.max_document_bytes == 19 * 1024 * 1024 == DEFAULT_MAX_DOCUMENT_BYTES


def test_settings_from_env_vars(clean_env: None) -> None:
    """Test that settings can be overridden via environment variables."""
    os.environ["APP_LOG_LEVEL"] = "ERROR"
    os.environ["APP_OPENAI_MODEL"] = "gpt-4o"
    os.environ["APP_EXTRACTION_MAX_CONCURRENCY"] = "4"
    os.environ["APP_OUTPUT_DIR"] = "/tmp/schedules"

    settings = Settings(_env_file=None)

    assert settings.log_level == "ERROR"
    assert settings.openai_model == "gpt-4o"
    assert settings.extraction_max_concurrency == 4
    assert settings.output_dir == "/tmp/schedules"


def test_settings_case_insensitive(clean_env: None) -> None:
    """Test that environment variables are case insensitive."""
    os.environ["app_log_level"] = "DEBUG"

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"


def test_settings_reject_zero_attempts(clean_env: None) -> None:
    """Test that at least one extraction attempt is required."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, extraction_max_attempts=0)


def test_settings_reject_unknown_provider(clean_env: None) -> None:
    """Test that only registered provider names validate."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, extraction_provider="invalid")  # type: ignore[arg-type]


def test_get_settings_factory() -> None:
    """Test that factory function returns Settings instance."""
    settings = get_settings()

    assert isinstance(settings, Settings)
