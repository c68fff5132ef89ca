"""
Table catalog persistence (raw SQL).

Each operation is a single statement run directly on the pool.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.sql import quote_ident


def create_table_sql(table: str, columns: list[tuple[str, str]]) -> str:
    definition = ", ".join(f"{quote_ident(name)} {col_type}" for (name, col_type) in columns)
    return f"CREATE TABLE IF NOT EXISTS {quote_ident(table)} ({definition})"


async def list_tables(pool: asyncpg.Pool) -> list[str]:
    names = await db.fetch_column(
        pool,
        """
        SELECT table_name
        FROM information_schema.tables
        WHERE table_schema = 'public'
        """,
    )
    return [str(name) for name in names]


async def read_table(pool: asyncpg.Pool, table: str) -> list[dict[str, Any]]:
    # No LIMIT; results are not paginated.
    return await db.fetch_all(pool, f"SELECT * FROM {quote_ident(table)}")


async def create_table(pool: asyncpg.Pool, table: str, columns: list[tuple[str, str]]) -> None:
    await db.execute(pool, create_table_sql(table, columns))


async def drop_table(pool: asyncpg.Pool, table: str) -> None:
    await db.execute(pool, f"DROP TABLE IF EXISTS {quote_ident(table)}")
