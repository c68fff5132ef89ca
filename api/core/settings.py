"""
Environment-backed settings.

Values are read on every call so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def database_url() -> str:
    return _env_str("DATABASE_URL")


def database_ssl() -> str:
    return _env_str("DATABASE_SSL").lower()


def pool_min_size() -> int:
    return max(_env_int("DB_POOL_MIN_SIZE", 1), 0)


def pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", 5), 1, pool_min_size())


def command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", 30)


def host() -> str:
    return _env_str("HOST", DEFAULT_HOST)


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def cors_allow_origins() -> list[str]:
    return _env_list("CORS_ALLOW_ORIGINS") or ["*"]


def table_allowlist() -> frozenset[str] | None:
    """
    Table names callers may touch, or None when every name is allowed.
    """
    names = _env_list("TABLE_ALLOWLIST")
    return frozenset(names) if names else None


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
