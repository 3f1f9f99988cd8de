"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gemini_api_key: str | None = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    chat_model: str = "gemini-2.5-flash"
    tracker_model: str = "gemini-2.5-flash"
    chat_temperature: float = 0.7
    history_window: int = 12
    gateway_timeout_seconds: float = 60.0
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    meal_history_namespace: str = "mama_chef_meals"
    max_saved_meals: int = 500
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_api_key(raw: str | None) -> str | None:
    """Normalize an API key from env, treating blanks as missing."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
