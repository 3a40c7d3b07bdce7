"""
Centralized configuration for the Riposte backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, HELICONE_*).
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Riposte API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: list[str] = ["Authorization", "Content-Type"]
    cors_expose_headers: list[str] = ["Riposte-Turn-Model"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""

    # LLM provider
    openai_api_key: str = ""
    helicone_api_key: str = ""
    helicone_base_url: Optional[str] = None

    # Turn orchestration
    default_model: str = "gpt-4o-mini"
    pro_trial_limit: int = 5
    min_completion_tokens: int = 50
    # First fragment (and title) deadline; the whole reply gets the stream deadline
    provider_timeout_seconds: float = 25.0
    provider_stream_timeout_seconds: float = 300.0
    persist_partial_turns: bool = True

    # Lets authenticated internal callers skip entitlement checks with "heh"
    allow_validation_bypass: bool = False


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
