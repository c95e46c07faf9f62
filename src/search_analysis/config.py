"""Centralized configuration for search-analysis using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide defaults loaded from ``SEARCH_ANALYSIS_*`` environment variables.

    Component constructors never read settings themselves; only the named
    analyzer registry and logging setup consult them, so an explicitly built
    analyzer is fully described by its own arguments.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_ANALYSIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Root level for search_analysis loggers"
    )
    log_json: bool = Field(default=False, description="Emit log records as JSON lines")

    # Named analyzers
    default_analyzer: str = Field(default="standard", description="Analyzer returned by get_analyzer(None)")
    elision_language: str = Field(default="french", description="Elision set used by the 'french' analyzer")
    phonetic_max_codes: int = Field(
        default=2, ge=1, description="Maximum phonetic codes per token for the 'phonetic' analyzer"
    )
    edge_ngram_max_gram: int = Field(
        default=20, ge=1, description="Longest prefix emitted by the 'autocomplete' analyzer"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings instance (``get_settings.cache_clear()`` reloads)."""
    return Settings()
