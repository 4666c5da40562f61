"""Configuration management for lineshell."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lineshell.errors import ConfigurationError
from lineshell.logging_utils import LogProfile, configure_logging

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Interpreter settings, read from ``LINESHELL_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="LINESHELL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Interactive loop
    prompt: str = Field(default="$ ", description="Prompt shown before each interactive line")
    intro: str = Field(default="", description="Banner printed once when the loop starts interactively")
    history_file: Path | None = Field(default=None, description="Persistent history for interactive input")
    program_name: str = Field(default="lineshell", description="Prefix of reported parse errors")

    # Pathname expansion
    expand_braces: bool = Field(default=True, description="Expand {a,b} alternatives")
    expand_tilde: bool = Field(default=True, description="Expand a leading ~ to the home directory")
    nocheck: bool = Field(default=True, description="Keep patterns that match nothing as literal words")

    # Logging
    log_level: str = Field(default="WARNING", description="Log level")
    log_profile: LogProfile = Field(default="default", description="Log format profile")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


def get_settings(**overrides: Any) -> Settings:
    """Build settings from the environment plus explicit overrides and configure logging.

    ``None`` overrides are ignored so CLI options can be passed through as-is.
    """

    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        settings = Settings(**values)
    except ValidationError as error:
        raise ConfigurationError(str(error)) from error

    configure_logging(level=settings.log_level, profile=settings.log_profile)
    logger.debug("config.loaded prompt={!r} history_file={}", settings.prompt, settings.history_file)
    return settings
