"""
ChefGenie - Configuration and settings.

All settings load from the environment (or a local .env file) on first use.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ChefGenieSettings(BaseSettings):
    """
    Application settings.

    The OpenAI key is optional so the cookbook commands work offline;
    generation calls fail with a GenerationError when it is missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str | None = None
    openai_base_url: str | None = None

    # Models
    text_model: str = "gpt-4.1-mini"
    image_model: str = "gpt-image-1"
    image_size: str = "1024x1024"
    transcription_model: str = "whisper-1"

    # Application
    chefgenie_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Prompt logging
    # CHEFGENIE_LOG_PROMPTS=1 - log to local files (dev only)
    chefgenie_log_prompts: bool = False

    # Cookbook storage
    cookbook_path: Path = Path.home() / ".chefgenie" / "cookbook.json"
    cookbook_key: str = "chefGenie_cookbook"
    cookbook_quota_bytes: int | None = 5 * 1024 * 1024  # Same order as browser local storage

    # Passthrough endpoint
    proxy_upstream_url: str = "https://api.openai.com/v1/chat/completions"
    proxy_model: str = "gpt-4.1-mini"
    proxy_max_output_tokens: int = 300
    proxy_timeout_seconds: float = 30.0
    function_secret: str | None = None  # Bearer secret callers must present, when set

    @property
    def is_development(self) -> bool:
        return self.chefgenie_env == "development"

    @property
    def is_production(self) -> bool:
        return self.chefgenie_env == "production"


@lru_cache
def get_settings() -> ChefGenieSettings:
    """Get cached settings instance."""
    return ChefGenieSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: ChefGenieSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
