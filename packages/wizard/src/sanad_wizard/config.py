"""Configuration system for the Sanad application wizard.

This module provides Pydantic Settings-based configuration with environment
variable support and defaults matching the assistance portal.

Usage:
    from sanad_wizard.config import SanadConfig

    # Load from environment variables and .env file
    config = SanadConfig()

    # Attachment limits
    print(config.staging.max_file_size)

    # Where the wizard navigates after a successful submission
    print(config.submission.success_path)
"""

import logging
from typing import Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sanad_core.attachments import ACCEPTED_MIME_TYPES, MAX_FILE_SIZE
from sanad_core.formatters import DEFAULT_CURRENCY


class StagingConfig(BaseSettings):
    """Attachment staging settings.

    Environment Variables:
        SANAD_STAGING_MAX_FILE_SIZE: Largest accepted file in bytes
        SANAD_STAGING_ACCEPTED_MIME_TYPES: JSON list of accepted MIME types
    """

    model_config = SettingsConfigDict(
        env_prefix="SANAD_STAGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_file_size: int = Field(
        default=MAX_FILE_SIZE,
        gt=0,
        description="Largest accepted attachment, in bytes",
    )
    accepted_mime_types: list[str] = Field(
        default_factory=lambda: sorted(ACCEPTED_MIME_TYPES),
        description="MIME types accepted for attachments",
    )

    @field_validator("accepted_mime_types")
    @classmethod
    def validate_mime_types(cls, v: list[str]) -> list[str]:
        """Normalize MIME types and require at least one."""
        cleaned = [t.strip().lower() for t in v if t and t.strip()]
        if not cleaned:
            raise ValueError("At least one accepted MIME type is required")
        return cleaned


class SubmissionConfig(BaseSettings):
    """Submission and navigation settings.

    Environment Variables:
        SANAD_SUBMISSION_SUCCESS_PATH: Destination after a successful submission
        SANAD_SUBMISSION_CATEGORY_SELECTION_PATH: Where to send applicants
            who reach a later step without category context
        SANAD_SUBMISSION_SUCCESS_MESSAGE: Confirmation shown after submission
        SANAD_SUBMISSION_FAILURE_MESSAGE: Error shown when submission fails
        SANAD_SUBMISSION_CURRENCY_LABEL: Currency label used in amounts
    """

    model_config = SettingsConfigDict(
        env_prefix="SANAD_SUBMISSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    success_path: str = Field(
        default="/my-applications",
        description="Navigation target after a successful submission",
    )
    category_selection_path: str = Field(
        default="/services",
        description="Navigation target for the category selection origin",
    )
    success_message: str = Field(
        default="Your application has been submitted successfully!",
        description="Confirmation message carried to the success page",
    )
    failure_message: str = Field(
        default="Failed to submit application. Please try again.",
        description="Message for the top-level submit error",
    )
    currency_label: str = Field(
        default=DEFAULT_CURRENCY,
        description="Currency label for formatted amounts",
    )

    @field_validator("success_path", "category_selection_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Navigation paths must be absolute."""
        v = v.strip()
        if not v.startswith("/"):
            raise ValueError(f"Navigation path must start with '/': {v!r}")
        return v


class SanadConfig(BaseSettings):
    """Root configuration for the wizard.

    Environment Variables:
        SANAD_ENV: Environment name (development, staging, production, test)
        SANAD_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = SanadConfig(
            staging=StagingConfig(max_file_size=2 * 1024 * 1024),
            submission=SubmissionConfig(success_path="/requests"),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="SANAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    staging: StagingConfig = Field(default_factory=StagingConfig)
    submission: SubmissionConfig = Field(default_factory=SubmissionConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def configure_logging(config: SanadConfig) -> None:
    """Configure structlog for the environment.

    Development gets the console renderer; every other environment logs JSON
    lines, with structured tracebacks in production.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if config.is_development:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        if config.is_production:
            processors.append(structlog.processors.dict_tracebacks)
        else:
            processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
    )


__all__ = [
    "StagingConfig",
    "SubmissionConfig",
    "SanadConfig",
    "configure_logging",
]
