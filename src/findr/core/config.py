"""Findr configuration.

Settings are loaded from environment variables with the FINDR_ prefix.
Credentials also accept the mobile app's EXPO_PUBLIC_* names and fall
back to placeholder values, which count as "not configured".

Example:
    >>> from findr.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.classify_timeout
    30.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GEMINI_PLACEHOLDER_KEY = "GEMINI-KEY"
SUPABASE_PLACEHOLDER_URL = "YOUR_SUPABASE_URL"
SUPABASE_PLACEHOLDER_KEY = "YOUR_SUPABASE_ANON_KEY"

# Values shipped in example .env files; never real credentials.
PLACEHOLDERS = frozenset(
    {
        GEMINI_PLACEHOLDER_KEY,
        SUPABASE_PLACEHOLDER_URL,
        SUPABASE_PLACEHOLDER_KEY,
        "your_gemini_api_key_here",
    }
)


def is_placeholder(value: str | None) -> bool:
    """True when a credential is empty or a known placeholder.

    Example:
        >>> is_placeholder("YOUR_SUPABASE_URL")
        True
        >>> is_placeholder("https://abc.supabase.co")
        False
    """
    return not value or value.strip() in PLACEHOLDERS


class Settings(BaseSettings):
    """Application settings.

    Example:
        >>> from findr.core.config import Settings
        >>> s = Settings(supabase_url="https://abc.supabase.co", supabase_anon_key="anon")
        >>> s.store_configured
        True
        >>> Settings(supabase_url="YOUR_SUPABASE_URL").store_configured
        False
    """

    model_config = SettingsConfigDict(
        env_prefix="FINDR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Classifier
    gemini_api_key: str = Field(
        default=GEMINI_PLACEHOLDER_KEY,
        validation_alias=AliasChoices("FINDR_GEMINI_API_KEY", "EXPO_PUBLIC_GEMINI_API_KEY", "gemini_api_key"),
    )
    gemini_model: str = Field(default="gemini-2.5-flash")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com")
    classify_timeout: float = Field(default=30.0, gt=0, description="Bound on the whole classify call")
    encode_timeout: float = Field(default=10.0, gt=0, description="Bound on reading and encoding the image")
    confidence_threshold: int = Field(default=30, ge=0, le=100)

    # Hosted store
    supabase_url: str = Field(
        default=SUPABASE_PLACEHOLDER_URL,
        validation_alias=AliasChoices("FINDR_SUPABASE_URL", "EXPO_PUBLIC_SUPABASE_URL", "supabase_url"),
    )
    supabase_anon_key: str = Field(
        default=SUPABASE_PLACEHOLDER_KEY,
        validation_alias=AliasChoices(
            "FINDR_SUPABASE_ANON_KEY", "EXPO_PUBLIC_SUPABASE_ANON_KEY", "supabase_anon_key"
        ),
    )
    storage_bucket: str = Field(default="animals")
    sightings_table: str = Field(default="creature_sightings")
    users_table: str = Field(default="users")
    request_timeout: float = Field(default=30.0, ge=1.0)

    # Alternative backend: "memory://" or a SQLAlchemy URL instead of the hosted store
    database_url: str | None = Field(default=None, description="Local or self-hosted database URL")

    # Device-local store
    data_dir: Path = Field(default=Path("./data"), description="Directory for the local key-value store")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def store_configured(self) -> bool:
        """A database URL is set, or the hosted store URL and anon key are both real."""
        if self.database_url:
            return True
        return not (is_placeholder(self.supabase_url) or is_placeholder(self.supabase_anon_key))

    @property
    def classifier_configured(self) -> bool:
        """Model API key is a real value."""
        return not is_placeholder(self.gemini_api_key)


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from findr.core.config import get_settings
        >>> get_settings(confidence_threshold=50).confidence_threshold
        50
    """
    return Settings(**overrides)
