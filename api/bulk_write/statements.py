"""
SQL statement assembly for bulk writes.

Pure functions: row records in, (sql, args) out. Identifiers are quoted with
`core.sql.quote_ident`; values are only ever bound as $n parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.errors import ValidationError
from core.sql import placeholders, quote_ident

# Reserved key in an update row: its value is written to the column of the
# same literal name, every other key becomes a WHERE condition.
UPDATE_FIELD = "updateField"


@dataclass(frozen=True)
class Statement:
    sql: str
    args: tuple[Any, ...]


def insert_columns(rows: list[dict[str, Any]]) -> list[str]:
    """
    Column list for an insert batch: keys of the first row, in order.

    Later rows are not checked against it.
    """
    return list(rows[0].keys())


def build_insert(table: str, columns: list[str], row: dict[str, Any]) -> Statement:
    column_sql = ",".join(quote_ident(col) for col in columns)
    value_sql = ",".join(placeholders(len(columns)))
    sql = f"INSERT INTO {quote_ident(table)} ({column_sql}) VALUES ({value_sql})"
    return Statement(sql=sql, args=tuple(row.get(col) for col in columns))


def partition_update_row(row: dict[str, Any]) -> tuple[list[str], list[str]]:
    """
    Split an update row into (match_keys, set_keys).
    """
    match_keys = [key for key in row if key != UPDATE_FIELD]
    set_keys = [key for key in row if key == UPDATE_FIELD]
    return match_keys, set_keys


def build_update(table: str, row: dict[str, Any]) -> Statement:
    match_keys, set_keys = partition_update_row(row)
    if not match_keys or not set_keys:
        raise ValidationError("No unique columns or update fields specified.")

    where_params = placeholders(len(match_keys))
    set_params = placeholders(len(set_keys), start=len(match_keys) + 1)

    conditions = " AND ".join(f"{quote_ident(key)} = {p}" for key, p in zip(match_keys, where_params))
    updates = ", ".join(f"{quote_ident(key)} = {p}" for key, p in zip(set_keys, set_params))

    sql = f"UPDATE {quote_ident(table)} SET {updates} WHERE {conditions}"
    args = tuple(row[key] for key in match_keys) + tuple(row[key] for key in set_keys)
    return Statement(sql=sql, args=args)
