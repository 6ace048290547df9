from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "daylog"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # API settings
    API_PREFIX: str = "/api"

    # Database
    DATABASE_PATH: str = "./db.sqlite"
    DB_BUSY_TIMEOUT_MS: int = 5000

    # Server settings
    HOST: Optional[str] = None
    APP_PORT: int = 3000

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Default account created on first boot
    ADMIN_USER: str = "yamapan"
    ADMIN_PASS: str = "yamapan2"

    # Auth settings
    BCRYPT_ROUNDS: int = 12
    SESSION_DURATION_HOURS: int = 24

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Settings loaded from the environment and .env, built once per process"""
    return Settings()
