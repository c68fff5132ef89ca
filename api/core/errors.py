"""
Gateway error types.

Services raise these; `api/main.py` turns them into plain-text responses.
"""

from __future__ import annotations


class GatewayError(RuntimeError):
    """Base for every error the API renders as a plain-text response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def public_message(self) -> str:
        return self.message


class ValidationError(GatewayError):
    """
    Malformed or missing request shape. Nothing has touched the database yet.
    """

    status_code = 400


class ExecutionError(GatewayError):
    """
    The database rejected a statement or could not be reached.

    `row_index` is the zero-based position of the failing row when the
    failure happened inside a batch, else None.
    """

    def __init__(self, message: str, *, table: str | None = None, row_index: int | None = None):
        super().__init__(message)
        self.table = table
        self.row_index = row_index

    def public_message(self) -> str:
        if self.row_index is None:
            return self.message
        return f"{self.message} (row {self.row_index})"
