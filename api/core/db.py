"""
Async database access helpers (raw SQL) using asyncpg.

The pool is created by the FastAPI lifespan hook (see `api/main.py`), stored
on `app.state.pool` and handed to routes through the `get_pool` dependency.
Data-access functions take the pool as an explicit argument.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import json
import logging
import ssl
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import settings

logger = logging.getLogger(__name__)

# Failures we translate into ExecutionError at the data-access seam.
DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_json_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


# Scalar types bound as text so Postgres coerces JSON values (ISO date strings,
# numeric strings, numbers into text columns). Decoders shape what reads return.
TEXT_CODECS: dict[str, tuple[Any, Any]] = {
    "int2": (_to_text, int),
    "int4": (_to_text, int),
    "int8": (_to_text, int),
    "float4": (_to_text, float),
    "float8": (_to_text, float),
    "numeric": (_to_text, str),
    "bool": (_to_text, lambda raw: raw == "t"),
    "date": (_to_text, str),
    "time": (_to_text, str),
    "timetz": (_to_text, str),
    "timestamp": (_to_text, str),
    "timestamptz": (_to_text, str),
    "interval": (_to_text, str),
    "uuid": (_to_text, str),
    "text": (_to_text, str),
    "varchar": (_to_text, str),
    "bpchar": (_to_text, str),
    "json": (_to_json_text, json.loads),
    "jsonb": (_to_json_text, json.loads),
}


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.database_url()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def ssl_option() -> ssl.SSLContext | bool | None:
    """
    Translate DATABASE_SSL into asyncpg's `ssl=` argument.

    `require` encrypts without verifying the server certificate, which is how
    hosted Postgres providers with self-signed chains are usually reached.
    """
    mode = settings.database_ssl()
    if mode == "require":
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx
    if mode == "disable":
        return False
    return None


async def init_connection(conn: asyncpg.Connection) -> None:
    """
    Per-connection setup: switch common scalar types to text-format codecs.
    """
    for type_name, (encoder, decoder) in TEXT_CODECS.items():
        await conn.set_type_codec(
            type_name,
            schema="pg_catalog",
            encoder=encoder,
            decoder=decoder,
            format="text",
        )


async def create_pool() -> asyncpg.Pool:
    return await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.pool_min_size(),
        max_size=settings.pool_max_size(),
        command_timeout=settings.command_timeout(),
        ssl=ssl_option(),
        init=init_connection,
    )


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()


async def check_connection(pool: asyncpg.Pool) -> bool:
    """
    Acquire one connection and run a trivial query. Never raises.
    """
    try:
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except DB_ERRORS:
        logger.exception("database_connection_failed")
        return False
    logger.info("database_connected")
    return True


def get_pool(request: Request) -> asyncpg.Pool:
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. The app lifespan must create it on startup.")
    return pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_all(pool: asyncpg.Pool, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_column(pool: asyncpg.Pool, sql: str, *args: Any) -> list[Any]:
    """
    Run a query and return the first column of every row.
    """
    rows = await pool.fetch(sql, *args)
    return [r[0] for r in rows]


async def execute(pool: asyncpg.Pool, sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    await pool.execute(sql, *args)
