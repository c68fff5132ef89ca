"""
Bulk write persistence.

One request = one connection = one transaction. Statements run one at a time
in batch order; the first failure rolls the whole batch back.
"""

from __future__ import annotations

import logging

import asyncpg

from core import db
from core.errors import ExecutionError

from .statements import Statement

logger = logging.getLogger(__name__)


async def execute_batch(
    pool: asyncpg.Pool,
    table: str,
    statements: list[Statement],
    *,
    failure_message: str,
) -> int:
    """
    Run `statements` inside a single transaction and return how many ran.

    Raises ExecutionError with `row_index` set to the failing statement's
    position, or None when the failure happened outside any statement
    (acquire, BEGIN, COMMIT). The connection always goes back to the pool.
    """
    try:
        async with pool.acquire() as conn:
            async with conn.transaction():
                for index, stmt in enumerate(statements):
                    try:
                        await conn.execute(stmt.sql, *stmt.args)
                    except db.DB_ERRORS as exc:
                        logger.exception("batch_statement_failed table=%s row_index=%s", table, index)
                        raise ExecutionError(failure_message, table=table, row_index=index) from exc
    except db.DB_ERRORS as exc:
        logger.exception("batch_transaction_failed table=%s", table)
        raise ExecutionError(failure_message, table=table) from exc

    return len(statements)
