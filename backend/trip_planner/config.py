"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Generative model
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 8192

    # Timeouts (seconds)
    llm_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 60.0

    # Client gateway
    backend_url: str = "http://localhost:8000"

    # Soft count expectations for generated batches
    expected_destination_count: int = 5
    expected_plan_count: int = 3

    # Currency assumed when a cost string carries none
    default_currency: str = "USD"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
