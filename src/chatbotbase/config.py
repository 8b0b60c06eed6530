"""Configuration management for chatbotbase."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatbotbase.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app: str | None = Field(None, description="Chatbot entrypoint as 'module:attr'")
    translations_path: Path | None = Field(None, description="JSON or YAML translation table")
    default_language: str = Field(default="en", description="Language assumed when a body carries none")
    random_seed: int | None = Field(None, description="Seed for reproducible variant selection")

    # Generic platform
    generic_secret: str | None = Field(None, description="Shared secret for generic platform signatures")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "console", "json"] = Field(default="default", description="Log output profile")


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment, ``.env`` and explicit overrides."""

    updates = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**updates)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc
