"""Application settings loaded from environment variables via pydantic-settings."""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Music catalog service settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Service ===
    app_name: str = "Music Catalog API"
    app_version: str = "2.0.0"
    environment: str = "development"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 3000

    # === Persistence ===
    database_url: str = "sqlite+aiosqlite:///./music_catalog.db"
    database_echo: bool = False

    # === Logging ===
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # === Auth ===
    auth_mode: str = "token"  # "token" or "demo"
    auth_tokens: List[str] = []

    # === HTTP ===
    cors_origins: List[str] = ["*"]
    expose_error_details: bool = False

    # === Catalog behaviour ===
    enforce_unique_on_update: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


app_settings = Settings()
