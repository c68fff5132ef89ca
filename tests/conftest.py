"""
Pytest configuration for the table gateway.

Provides:
- an in-memory stand-in for an asyncpg pool that records statements and
  transaction boundaries
- a TestClient wired to that pool
- a live-database client for integration tests (skipped without
  TEST_DATABASE_URL)
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, Callable, Generator

import asyncpg
import pytest
from fastapi.testclient import TestClient


class FakeTransaction:
    def __init__(self, pool: "FakePool"):
        self.pool = pool

    async def __aenter__(self) -> "FakeTransaction":
        self.pool.events.append("BEGIN")
        self.pool.pending = []
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.pool.events.append("COMMIT")
            self.pool.committed.extend(self.pool.pending)
        else:
            self.pool.events.append("ROLLBACK")
        self.pool.pending = []
        return False


class FakeConnection:
    def __init__(self, pool: "FakePool"):
        self.pool = pool

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self.pool)

    async def execute(self, sql: str, *args: Any) -> str:
        self.pool.statements.append((sql, args))
        if self.pool.fail_when is not None and self.pool.fail_when(sql, args):
            raise asyncpg.exceptions.UndefinedColumnError("column does not exist")
        self.pool.pending.append((sql, args))
        return "OK"

    async def fetchval(self, sql: str, *args: Any) -> Any:
        self.pool.statements.append((sql, args))
        return 1


class FakePool:
    """
    Just enough of asyncpg.Pool for the bulk write path.
    """

    def __init__(self) -> None:
        self.statements: list[tuple[str, tuple]] = []
        self.events: list[str] = []
        self.pending: list[tuple[str, tuple]] = []
        self.committed: list[tuple[str, tuple]] = []
        self.acquired = 0
        self.released = 0
        self.fail_when: Callable[[str, tuple], bool] | None = None
        self.acquire_error: BaseException | None = None

    @asynccontextmanager
    async def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        try:
            yield FakeConnection(self)
        finally:
            self.released += 1


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def client(fake_pool: FakePool) -> Generator[TestClient, None, None]:
    """
    TestClient without the lifespan hook; routes get `fake_pool`.
    """
    from core import db
    from main import app

    app.dependency_overrides[db.get_pool] = lambda: fake_pool
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _no_table_allowlist(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TABLE_ALLOWLIST", raising=False)


@pytest.fixture(scope="session")
def test_database_url() -> str:
    url = os.getenv("TEST_DATABASE_URL", "").strip()
    if not url:
        pytest.skip("TEST_DATABASE_URL not set; skipping integration tests")
    return url


@pytest.fixture
def live_client(test_database_url: str, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """
    TestClient running the real lifespan against TEST_DATABASE_URL.
    """
    monkeypatch.setenv("DATABASE_URL", test_database_url)
    from main import app

    with TestClient(app) as c:
        yield c
