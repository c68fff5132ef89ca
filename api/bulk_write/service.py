"""
Bulk write business logic.

- insert_batch: column list from the first row, one INSERT per row
- update_batch: one UPDATE per row, keyed by every non-`updateField` column

Both validate the whole batch and build every statement before touching the
database, then run all statements in one transaction.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg
import pydantic

from core.errors import ValidationError
from core.sql import require_table_name

from . import repository, schemas, statements

logger = logging.getLogger(__name__)

INSERT_FAILED = "Failed to upload data."
UPDATE_FAILED = "Error updating table data"


def parse_upload(payload: Any) -> list[dict[str, Any]]:
    """
    Pull the row list out of a `{data: [...]}` body.
    """
    try:
        request = schemas.UploadRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("No data to upload.") from exc
    return request.data


def parse_update(payload: Any) -> list[dict[str, Any]]:
    try:
        return schemas.UpdateBatch.validate_python(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid data format.") from exc


async def insert_batch(pool: asyncpg.Pool, table: str, rows: list[dict[str, Any]]) -> int:
    table = require_table_name(table)
    if not rows:
        raise ValidationError("No data to upload.")

    columns = statements.insert_columns(rows)
    if not columns:
        raise ValidationError("No data to upload.")
    batch = [statements.build_insert(table, columns, row) for row in rows]

    count = await repository.execute_batch(pool, table, batch, failure_message=INSERT_FAILED)
    logger.info("batch_inserted table=%s rows=%s", table, count)
    return count


async def update_batch(pool: asyncpg.Pool, table: str, rows: list[dict[str, Any]]) -> int:
    table = require_table_name(table)
    if not rows:
        raise ValidationError("Invalid data format.")

    # Raises on the first malformed row, before any statement executes.
    batch = [statements.build_update(table, row) for row in rows]

    count = await repository.execute_batch(pool, table, batch, failure_message=UPDATE_FAILED)
    logger.info("batch_updated table=%s rows=%s", table, count)
    return count
