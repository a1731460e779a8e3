"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutritrack.domain.models import UserSettings

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    openai_timeout_seconds: float = 30.0
    mirror_path: Path = Path(".nutritrack/mirror.json")
    default_tmb: float = 2700
    default_user_name: str = "User"
    default_range_days: int = 10
    sync_status_display_seconds: float = 3.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    def default_user_settings(self) -> UserSettings:
        """Settings a user starts with before saving their own."""
        return UserSettings(tmb=self.default_tmb, name=self.default_user_name)
