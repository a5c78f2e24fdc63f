# todo_api/core/config.py
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    url = os.getenv("DATABASE_URL")
    if url and url.strip():
        return url
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'todos.db')}"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings(BaseModel):
    # storage
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    DB_POOL_SIZE: int = Field(default_factory=lambda: int(os.getenv("DB_POOL_SIZE", "10")))
    DB_MAX_OVERFLOW: int = Field(default_factory=lambda: int(os.getenv("DB_MAX_OVERFLOW", "0")))
    AUTO_MIGRATE: bool = Field(default_factory=lambda: _env_bool("AUTO_MIGRATE", "true"))

    # tokens
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    REFRESH_SECRET_KEY: str = Field(default_factory=lambda: os.getenv("REFRESH_SECRET_KEY", "CHANGE_ME_ANOTHER_SECRET"))
    ALGORITHM: str = Field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")))
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default_factory=lambda: int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")))

    # http
    HOST: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    PORT: int = Field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    API_PREFIX: str = Field(default_factory=lambda: os.getenv("API_PREFIX", "/api/v1"))
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # rate limiting (janela fixa por IP)
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default_factory=lambda: int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900")))
    RATE_LIMIT_MAX: int = Field(default_factory=lambda: int(os.getenv("RATE_LIMIT_MAX", "100")))
    AUTH_RATE_LIMIT_MAX: int = Field(default_factory=lambda: int(os.getenv("AUTH_RATE_LIMIT_MAX", "10")))

    # todos
    TODO_LIST_DEFAULT_LIMIT: int = 10
    TODO_LIST_MAX_LIMIT: int = Field(default_factory=lambda: int(os.getenv("TODO_LIST_MAX_LIMIT", "100")))

settings = Settings()
