from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..services.exceptions import ConfigurationError

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


class Settings(BaseSettings):
    """Runtime configuration for the SFX worker process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    deepseek_api_key: Optional[str] = Field(
        default=None,
        description="API key for the DeepSeek chat completion endpoint.",
    )
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com/v1",
        description="Base URL of the OpenAI-compatible DeepSeek API.",
    )
    deepseek_model: str = Field(
        default="deepseek-chat",
        max_length=128,
        description="Model identifier used for parameter inference.",
    )
    soundraw_api_key: Optional[str] = Field(
        default=None,
        description="Bearer token for the Soundraw v3 API.",
    )
    soundraw_base_url: str = Field(
        default="https://soundraw.io/api/v3",
        description="Base URL of the Soundraw v3 API.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Per-request timeout for calls to remote services.",
    )
    log_level: str = Field(default="INFO", description="Minimum level for log output.")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: Any) -> str:
        level = str(value or "INFO").strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"unsupported log level: {value}")
        return level

    def require_deepseek_api_key(self) -> str:
        if not self.deepseek_api_key:
            raise ConfigurationError("DEEPSEEK_API_KEY environment variable is required")
        return self.deepseek_api_key

    def require_soundraw_api_key(self) -> str:
        if not self.soundraw_api_key:
            raise ConfigurationError("SOUNDRAW_API_KEY environment variable is required")
        return self.soundraw_api_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
