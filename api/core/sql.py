"""
Identifier handling for dynamically assembled SQL.

Every table and column name that ends up in statement text goes through
`quote_ident`. Values never do: they are always bound as $n parameters.

Quoting keeps a name inside its double quotes. It does not make arbitrary
caller input safe to run (column *types* in CREATE TABLE are still passed
verbatim); use TABLE_ALLOWLIST to restrict which tables can be reached.
"""

from __future__ import annotations

from . import settings
from .errors import ValidationError


def quote_ident(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValidationError("Identifier must be a non-empty string.")
    if "\x00" in name:
        raise ValidationError("Identifier must not contain NUL characters.")
    return '"' + name.replace('"', '""') + '"'


def placeholders(count: int, *, start: int = 1) -> list[str]:
    return [f"${i}" for i in range(start, start + count)]


def check_table_allowed(name: str) -> None:
    allowed = settings.table_allowlist()
    if allowed is not None and name not in allowed:
        raise ValidationError(f"Table {name} is not accessible")


def require_table_name(name: str | None) -> str:
    """
    Non-empty and, when TABLE_ALLOWLIST is set, on the list.
    """
    name = name or ""
    if not name:
        raise ValidationError("Table name is required")
    check_table_allowed(name)
    return name
