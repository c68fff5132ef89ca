"""
Table catalog business logic.

Scope:
- list tables in the public schema
- read a whole table
- create / drop a table by name

Every function here maps database failures to ExecutionError and bad input to
ValidationError; routers never see asyncpg exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg
import pydantic
from fastapi.encoders import jsonable_encoder

from core import db, settings
from core.errors import ExecutionError, ValidationError
from core.sql import check_table_allowed, require_table_name

from . import repository, schemas

logger = logging.getLogger(__name__)


def parse_create_request(payload: Any) -> schemas.CreateTableRequest:
    try:
        return schemas.CreateTableRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("Table name and columns are required") from exc


async def list_tables(pool: asyncpg.Pool) -> list[str]:
    try:
        names = await repository.list_tables(pool)
    except db.DB_ERRORS as exc:
        logger.exception("list_tables_failed")
        raise ExecutionError("Error fetching table names") from exc

    allowed = settings.table_allowlist()
    if allowed is None:
        return names
    return [name for name in names if name in allowed]


async def read_table(pool: asyncpg.Pool, table: str) -> list[dict[str, Any]]:
    table = require_table_name(table)
    try:
        rows = await repository.read_table(pool, table)
    except db.DB_ERRORS as exc:
        logger.exception("read_table_failed table=%s", table)
        raise ExecutionError(f"Error fetching data from {table}", table=table) from exc

    # Column types without a JSON form (non-UTF-8 bytea, ranges) fail here.
    try:
        return jsonable_encoder(rows)
    except (TypeError, ValueError) as exc:
        logger.exception("read_table_encode_failed table=%s", table)
        raise ExecutionError(f"Error fetching data from {table}", table=table) from exc


async def create_table(pool: asyncpg.Pool, payload: Any) -> str:
    """
    Create a table from a `{tableName, columns: [{name, type}]}` payload.

    Column types are not checked here; whatever the engine accepts goes.
    Returns the table name.
    """
    request = parse_create_request(payload)
    table = request.table_name
    check_table_allowed(table)
    columns = [(col.name, col.type) for col in request.columns]

    try:
        await repository.create_table(pool, table, columns)
    except db.DB_ERRORS as exc:
        logger.exception("create_table_failed table=%s", table)
        raise ExecutionError(f"Error creating table {table}", table=table) from exc

    logger.info("table_created table=%s columns=%s", table, len(columns))
    return table


async def delete_table(pool: asyncpg.Pool, table: str) -> str:
    table = require_table_name(table)
    try:
        await repository.drop_table(pool, table)
    except db.DB_ERRORS as exc:
        logger.exception("delete_table_failed table=%s", table)
        raise ExecutionError(f"Error deleting table {table}", table=table) from exc

    logger.info("table_dropped table=%s", table)
    return table
