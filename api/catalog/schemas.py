"""
Pydantic schemas for table catalog endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ColumnSpec(BaseModel):
    name: str = Field(..., min_length=1)
    # Passed to CREATE TABLE verbatim; the engine decides what is valid.
    type: str = Field(..., min_length=1)


class CreateTableRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    table_name: str = Field(..., alias="tableName", min_length=1)
    columns: list[ColumnSpec]
