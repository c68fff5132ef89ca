"""
Table catalog API endpoints.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from core import db

from . import service

router = APIRouter()


@router.get("/tables")
async def list_tables(pool: asyncpg.Pool = Depends(db.get_pool)) -> list[str]:
    return await service.list_tables(pool)


@router.get("/table-data/{table_name}")
async def read_table(table_name: str, pool: asyncpg.Pool = Depends(db.get_pool)) -> list[dict[str, Any]]:
    """
    Every row of the table, unfiltered and unpaginated.
    """
    return await service.read_table(pool, table_name)


@router.post("/create-table", response_class=PlainTextResponse, status_code=201)
async def create_table(
    payload: Any = Body(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> str:
    table = await service.create_table(pool, payload)
    return f"Table {table} created successfully"


@router.delete("/delete-table/{table_name}", response_class=PlainTextResponse)
async def delete_table(table_name: str, pool: asyncpg.Pool = Depends(db.get_pool)) -> str:
    table = await service.delete_table(pool, table_name)
    return f"Table {table} deleted successfully"
