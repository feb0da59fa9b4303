"""Application settings and configuration management.

This module provides centralized runtime configuration for SoVITS VoiceGen
using Pydantic Settings for robust environment variable management.

Configuration sources (in order of precedence):
    1. Environment variables
    2. .env file (auto-loaded if present)
    3. Default values specified in field definitions

Author:
    Ruslan Magana Vsevolodovna

Website:
    https://ruslanmv.com

License:
    Apache-2.0

Examples:
    >>> # Load settings from environment
    >>> settings = Settings()
    >>> print(settings.SOVITS_API_URL)
    http://127.0.0.1:9880

    >>> # Override settings programmatically (useful for testing)
    >>> test_settings = Settings(SOVITS_API_URL="http://gpu-box:9880/")
    >>> print(test_settings.SOVITS_API_URL)
    http://gpu-box:9880
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Configure module-level logger
logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application-wide configuration settings.

    All settings can be overridden via environment variables. The naming convention
    is case-insensitive, so both LOG_LEVEL and log_level will work.

    Attributes:
        LOG_LEVEL: Python logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        SOVITS_API_URL: Base URL of the GPT-SoVITS api_v2 server.
        SOVITS_TIMEOUT: Per-request timeout in seconds. Unset means no timeout.
        SOVITS_SERIALIZE_MODEL_CHECKS: Guard the "is a model switch needed?"
            check with a lock so concurrent generations never double-switch.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # General Settings
    # ─────────────────────────────────────────────────────────────────────────

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Python logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # GPT-SoVITS Backend
    # ─────────────────────────────────────────────────────────────────────────

    SOVITS_API_URL: str = Field(
        default="http://127.0.0.1:9880",
        description="Base URL of the GPT-SoVITS api_v2 server (or a proxy in front of it)",
    )

    SOVITS_TIMEOUT: Optional[float] = Field(
        default=None,
        description=(
            "Timeout in seconds for each backend request. "
            "Leave unset to wait indefinitely (model loads can take minutes)."
        ),
        gt=0,
    )

    SOVITS_SERIALIZE_MODEL_CHECKS: bool = Field(
        default=False,
        description=(
            "Hold a lock across the compare-and-switch step of each generation. "
            "Prevents two concurrent requests from both reloading the same models."
        ),
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Field Validators
    # ─────────────────────────────────────────────────────────────────────────

    @field_validator("SOVITS_API_URL", mode="after")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        """Strip trailing slashes so endpoint paths can be appended directly.

        Raises:
            ValueError: If the URL is empty or lacks an http(s) scheme.
        """
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            msg = f"SOVITS_API_URL must start with http:// or https:// (got {value!r})"
            raise ValueError(msg)
        return value

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Upper-case the level name and reject anything logging does not know."""
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {value!r}. Use one of {', '.join(_LOG_LEVELS)}"
            )
        return level

    # ─────────────────────────────────────────────────────────────────────────
    # Pydantic Settings Configuration
    # ─────────────────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
        validate_default=True,
    )

    def configure_logging(self) -> None:
        """Install a root handler at LOG_LEVEL. Call once from the entry point."""
        logging.basicConfig(
            level=self.LOG_LEVEL,
            format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        logger.debug("Logging configured at %s", self.LOG_LEVEL)


# ─────────────────────────────────────────────────────────────────────────────
# Global Settings Instance
# ─────────────────────────────────────────────────────────────────────────────

# Singleton settings instance; entry points call configure_logging() themselves
settings = Settings()
