"""Configuration management for the pharmacy sales-assistant backend.

All configuration is loaded from environment variables and/or .env file.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root detection
PROJECT_ROOT = Path(__file__).resolve().parents[3]
ENV_FILE = PROJECT_ROOT / ".env"

DEFAULT_PHARMACY_API_URL = "https://67e14fb758cc6bf785254550.mockapi.io/pharmacies"


class Settings(BaseSettings):
    """
    Runtime configuration powered by environment variables and .env overrides.

    All settings can be configured via:
    1. Environment variables (highest priority)
    2. .env file in project root (loaded automatically)
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # -------------------------------------------------------------------------
    # Pharmacy directory (external record store)
    # -------------------------------------------------------------------------
    pharmacy_api_url: str = Field(
        default=DEFAULT_PHARMACY_API_URL,
        alias="PHARMACY_API_URL",
        description="Collection URL of the pharmacy record store (GET list, POST create).",
    )
    pharmacy_api_timeout: int = Field(default=10, alias="PHARMACY_API_TIMEOUT", ge=1)

    # -------------------------------------------------------------------------
    # OpenAI (primary)
    # -------------------------------------------------------------------------
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4", alias="OPENAI_MODEL")
    openai_extraction_model: str = Field(default="gpt-3.5-turbo", alias="OPENAI_EXTRACTION_MODEL")
    openai_timeout_seconds: int = Field(default=30, alias="OPENAI_TIMEOUT_SECONDS", ge=1)

    # -------------------------------------------------------------------------
    # Anthropic (alternative provider)
    # -------------------------------------------------------------------------
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field(default="claude-sonnet-4-20250514", alias="ANTHROPIC_MODEL")
    anthropic_timeout_seconds: int = Field(default=30, alias="ANTHROPIC_TIMEOUT_SECONDS", ge=1)

    # -------------------------------------------------------------------------
    # Generation parameters
    # -------------------------------------------------------------------------
    chat_temperature: float = Field(default=0.7, alias="CHAT_TEMPERATURE", ge=0.0, le=1.0)
    chat_max_tokens: int = Field(default=500, alias="CHAT_MAX_TOKENS", ge=1)
    extraction_temperature: float = Field(default=0.1, alias="EXTRACTION_TEMPERATURE", ge=0.0, le=1.0)
    extraction_max_tokens: int = Field(default=200, alias="EXTRACTION_MAX_TOKENS", ge=1)

    # -------------------------------------------------------------------------
    # Conversation behaviour
    # -------------------------------------------------------------------------
    company_name: str = Field(default="Pharmesol", alias="COMPANY_NAME")
    enable_product_faq: bool = Field(
        default=True,
        alias="ENABLE_PRODUCT_FAQ",
        description="Answer questions about the company with the fixed overview text",
    )

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="CORS_ORIGINS",
    )
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=3001, alias="API_PORT", ge=1, le=65535)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")  # "text" or "json"
    environment: str = Field(default="local", alias="ENVIRONMENT")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is valid."""
        lower = v.lower()
        if lower not in {"text", "json"}:
            raise ValueError("log_format must be 'text' or 'json'")
        return lower

    @field_validator("pharmacy_api_url")
    @classmethod
    def validate_pharmacy_api_url(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("PHARMACY_API_URL must be an http(s) URL")
        return stripped

    # -------------------------------------------------------------------------
    # Helper Methods for Feature Detection
    # -------------------------------------------------------------------------

    def is_openai_enabled(self) -> bool:
        """Check if OpenAI is configured."""
        return bool(self.openai_api_key)

    def is_anthropic_enabled(self) -> bool:
        """Check if Anthropic/Claude is configured."""
        return bool(self.anthropic_api_key)

    def is_llm_enabled(self) -> bool:
        """Check if any LLM is configured (OpenAI or Anthropic)."""
        return self.is_openai_enabled() or self.is_anthropic_enabled()

    def cors_origin_list(self) -> list[str]:
        """Split CORS_ORIGINS, dropping blanks and trailing slashes."""
        origins = []
        for origin in self.cors_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin:
                origins.append(origin)
        return origins

    def get_enabled_services(self) -> list[str]:
        """Get list of enabled external services."""
        services = ["pharmacy_directory"]
        if self.is_openai_enabled():
            services.append("openai")
        if self.is_anthropic_enabled():
            services.append("anthropic")
        if self.enable_product_faq:
            services.append("product_faq")
        return services


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached. To reload settings,
    call `get_settings.cache_clear()` first.

    Returns:
        Settings object with all configuration.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Clear settings cache and reload from environment.

    Useful for testing or after modifying .env file.
    """
    get_settings.cache_clear()
    return get_settings()
