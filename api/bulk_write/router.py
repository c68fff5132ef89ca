"""
Bulk write API endpoints.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from core import db

from . import service

router = APIRouter()


@router.put("/update-table/{table_name}", response_class=PlainTextResponse)
async def update_table(
    table_name: str,
    payload: Any = Body(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> str:
    """
    Apply a batch of keyed updates in one transaction.

    Body: `[{col: val, ..., updateField: val}, ...]`
    """
    rows = service.parse_update(payload)
    await service.update_batch(pool, table_name, rows)
    return "Table data updated successfully"


@router.post("/upload/{table_name}", response_class=PlainTextResponse)
async def upload(
    table_name: str,
    payload: Any = Body(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> str:
    """
    Insert a batch of rows in one transaction.

    Body: `{data: [{col: val, ...}, ...]}`
    """
    rows = service.parse_upload(payload)
    await service.insert_batch(pool, table_name, rows)
    return "Data uploaded successfully!"
