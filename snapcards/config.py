"""
Configuration settings for snapcards.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with ``SNAPCARDS_`` (e.g. ``SNAPCARDS_DATA_DIR``);
the Gemini key is also read from a bare ``GEMINI_API_KEY``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values people leave behind from .env templates
PLACEHOLDER_API_KEYS = frozenset({"", "your_api_key_here", "undefined"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SNAPCARDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".snapcards",
        description="Directory holding the local key-value store",
    )
    storage_backend: Literal["file", "sqlite", "memory"] = Field(
        default="file",
        description="Key-value backend for cards and folders",
    )
    cards_key: str = Field(
        default="flashcards",
        description="Storage key for the card collection",
    )
    folders_key: str = Field(
        default="flashcards_folders",
        description="Storage key for the folder list",
    )
    storage_quota_bytes: int | None = Field(
        default=None,
        description="Byte quota for the memory backend (None for unlimited)",
    )

    # ========================================
    # AI Integration (card generation)
    # ========================================
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SNAPCARDS_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="Google Generative AI (Gemini) API key",
    )
    ai_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used for text extraction and card generation",
    )
    generation_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for a single generation request",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def has_ai_configured(self) -> bool:
        """Check if a usable Gemini key is present."""
        return self.gemini_api_key is not None and self.gemini_api_key.strip() not in PLACEHOLDER_API_KEYS


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
