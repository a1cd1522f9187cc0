from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

API_NAME = "Demo Task Manager API"
API_VERSION = "1.0.0"

DEFAULT_PORT = 3001
DEFAULT_API_KEY = "demo-key-12345"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PORT: listen port (default 3001)
    - HOST: listen address (default '0.0.0.0')
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - API_KEY: shared secret expected in the x-api-key header for protected routes
      (default 'demo-key-12345')
    - LOG_LEVEL: root log level name (default 'INFO')
    """

    port: int
    host: str
    cors_allow_origins: List[str]
    api_key: str
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_port(value: str, default: int = DEFAULT_PORT) -> int:
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
    return Settings(
        port=_parse_port(_get_env("PORT", str(DEFAULT_PORT))),
        host=_get_env("HOST", "0.0.0.0").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        api_key=_get_env("API_KEY", DEFAULT_API_KEY),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
