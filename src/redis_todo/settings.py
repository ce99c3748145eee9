from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

TODOS_KEY = "todos"
TODOS_TTL_SECONDS = 7200  # 2 hours


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - REDIS_HOST: Redis host name. Default 'localhost'
    - REDIS_PORT: Redis port. Default 6379
    - STORE_BACKEND: 'redis' (default) or 'memory'
    - APP_HOST: bind address for the HTTP server. Default '0.0.0.0'
    - APP_PORT: listen port for the HTTP server. Default 3001
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - APP_ENV: 'development' (default) or 'production' (JSON logs)
    - LOG_LEVEL: minimum log level name. Default 'INFO'
    """

    redis_host: str
    redis_port: int
    store_backend: str
    app_host: str
    app_port: int
    cors_allow_origins: List[str]
    app_env: str
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_port(value: str, default: int) -> int:
    try:
        port = int(value.strip())
    except ValueError:
        return default
    if not (0 < port < 65536):
        return default
    return port


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("STORE_BACKEND", "redis").strip().lower()
    if backend not in {"redis", "memory"}:
        backend = "redis"

    app_env = _get_env("APP_ENV", "development").strip().lower()
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()

    return Settings(
        redis_host=_get_env("REDIS_HOST", "localhost").strip(),
        redis_port=_parse_port(_get_env("REDIS_PORT", "6379"), 6379),
        store_backend=backend,
        app_host=_get_env("APP_HOST", "0.0.0.0").strip(),
        app_port=_parse_port(_get_env("APP_PORT", "3001"), 3001),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        app_env=app_env,
        log_level=log_level,
    )
