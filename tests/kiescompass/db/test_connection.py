"""Tests for engine creation and the request-scoped session dependency."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import inspect

import kiescompass.db.connection as connection


class _FakeSession:
    def __init__(self) -> None:
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> "_FakeSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


@pytest.mark.asyncio
async def test_sqlite_engine_and_schema_creation() -> None:
    engine = connection.create_engine("sqlite+aiosqlite:///:memory:")
    try:
        await connection.create_all_tables(engine)
        async with connection.begin_engine_transaction(engine) as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    finally:
        await engine.dispose()

    assert {"users", "vkm", "user_favorites"} <= set(tables)


@pytest.mark.asyncio
async def test_get_db_commits_on_success(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeSession()
    monkeypatch.setattr(connection, "get_session_factory", lambda: lambda: fake)

    dependency = connection.get_db()
    assert await dependency.__anext__() is fake
    with pytest.raises(StopAsyncIteration):
        await dependency.__anext__()

    assert fake.committed
    assert not fake.rolled_back


@pytest.mark.asyncio
async def test_get_db_rolls_back_on_error(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeSession()
    monkeypatch.setattr(connection, "get_session_factory", lambda: lambda: fake)

    dependency = connection.get_db()
    await dependency.__anext__()
    with pytest.raises(RuntimeError, match="boom"):
        await dependency.athrow(RuntimeError("boom"))

    assert fake.rolled_back
    assert not fake.committed
