from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="INTERSPLIT_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./intersplit.db"
    default_channel: str = "0000intercom"
    include_payer_in_split: bool = True
    identity: str | None = None
    log_level: str = "INFO"
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
