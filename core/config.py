# core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from ``LUMINA_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="LUMINA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Lumina Workflows"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Load the sample workflows into a fresh store
    seed_samples: bool = Field(default=True)

    assistant_api_key: Optional[str] = Field(default=None)
    assistant_base_url: str = Field(default="https://openrouter.ai/api/v1")
    assistant_model: str = Field(default="google/gemini-2.0-flash-001")
    assistant_temperature: float = Field(default=0.3)
    assistant_timeout: float = Field(default=60.0)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
