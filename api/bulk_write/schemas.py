"""
Pydantic schemas for bulk write endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, TypeAdapter

RowRecord = dict[str, Any]


class UploadRequest(BaseModel):
    data: list[RowRecord]


# PUT /update-table takes a bare JSON array.
UpdateBatch = TypeAdapter(list[RowRecord])
