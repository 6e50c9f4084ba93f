from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = Path(__file__).resolve().parents[2] / "configs/.env"
SECRETS_ENV_PATH = Path(__file__).resolve().parents[2] / "configs/secrets/.env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[str(SECRETS_ENV_PATH), str(ENV_PATH)],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # App
    APP_ENV: str = "dev"
    APP_NAME: str = "feeportal"
    LOG_LEVEL: str = "INFO"

    # Backend API
    API_BASE_URL: str = "http://localhost:5000/api"
    API_TIMEOUT: float = 30.0
    CONNECTION_CHECK_TIMEOUT: float = 5.0

    # Auth
    LOGIN_ROUTE: str = "/login"
    TOKEN_STORE_PATH: str = str(Path.home() / ".feeportal" / "tokens.json")

    # Listing
    DEFAULT_PAGE_SIZE: int = 10


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
