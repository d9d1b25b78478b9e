from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

_BACKENDS = {"file", "memory", "sqlite"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'file' (default), 'memory' or 'sqlite'
    - BOARD_DATA_FILE: path to the JSON board document. Default './data/tasks.json'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/board.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - HOST / PORT: bind address for the server. Default 127.0.0.1:5000
    - LOG_LEVEL: logging level name. Default 'INFO'
    - KANBAN_API_URL: base URL the client cache talks to. Default 'http://localhost:5000/api'
    """

    persistence_backend: str
    board_data_file: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    host: str
    port: int
    log_level: str
    api_url: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


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
    backend = _get_env("PERSISTENCE_BACKEND", "file").strip().lower()
    if backend not in _BACKENDS:
        backend = "file"

    return Settings(
        persistence_backend=backend,
        board_data_file=_get_env("BOARD_DATA_FILE", "./data/tasks.json").strip(),
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/board.db").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        host=_get_env("HOST", "127.0.0.1").strip(),
        port=_parse_int(_get_env("PORT", "5000"), 5000),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        api_url=_get_env("KANBAN_API_URL", "http://localhost:5000/api").strip().rstrip("/"),
    )
