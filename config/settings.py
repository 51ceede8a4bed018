"""
Configuration management for the Contract Analyzer.

This module uses Pydantic Settings for type-safe configuration
with automatic environment variable loading and validation.

Environment variables can be set in:
- Shell environment
- .env file in project root

Example:
    >>> from config.settings import settings
    >>> print(settings.MODEL_NAME)
    gemini-1.5-flash
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    The prefix is not used, so GOOGLE_AI_API_KEY maps directly to the
    GOOGLE_AI_API_KEY env var.

    Attributes:
        GOOGLE_AI_API_KEY: API key for the Gemini generative service.
        MODEL_NAME: Gemini model used to write the analysis report.
        GEMINI_API_URL: Base URL of the Gemini REST API.
        REQUEST_TIMEOUT: Seconds to wait for the service before giving up.
        MAX_TEXT_LENGTH: Plain-text documents are truncated to this length.
        MIN_TEXT_LENGTH: Shorter plain-text documents are rejected.
        MIN_RESPONSE_LENGTH: Shorter service responses count as incomplete.
        USE_MOCK_GENERATOR: Return a canned report instead of calling Gemini.
        LOG_LEVEL: Logging verbosity level.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generative service
    GOOGLE_AI_API_KEY: str = Field(
        default="",
        description="Google AI (Gemini) API key"
    )
    MODEL_NAME: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model name"
    )
    GEMINI_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL"
    )
    REQUEST_TIMEOUT: float = Field(
        default=60.0,
        gt=0,
        description="Generation request timeout in seconds"
    )
    USE_MOCK_GENERATOR: bool = Field(
        default=False,
        description="Use the canned sample report instead of Gemini"
    )

    # Validation limits
    MAX_TEXT_LENGTH: int = Field(
        default=100_000,
        gt=0,
        description="Maximum characters of plain text sent for analysis"
    )
    MIN_TEXT_LENGTH: int = Field(
        default=50,
        ge=0,
        description="Minimum characters of plain text accepted"
    )
    MIN_RESPONSE_LENGTH: int = Field(
        default=100,
        ge=0,
        description="Minimum characters of a usable AI response"
    )

    # API server
    API_HOST: str = Field(default="0.0.0.0", description="API bind host")
    API_PORT: int = Field(default=8000, description="API bind port")

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity"
    )

    @field_validator("GEMINI_API_URL")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensure the Gemini URL has an HTTP scheme."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("GEMINI_API_URL must start with https:// or http://")
        return v.rstrip("/")

    @property
    def has_api_key(self) -> bool:
        """Check if a Gemini API key is configured."""
        return bool(self.GOOGLE_AI_API_KEY.strip())


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Singleton Settings instance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
