from __future__ import annotations

from typing import Any

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from sql_workbench.errors import ExecutionError
from sql_workbench.models.domain import ExecutionResponse


class FakeBackend:
    """ExecutionBackend double that records statements and replays canned rows."""

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        error: str | None = None,
    ) -> None:
        self.rows = rows if rows is not None else [{"id": 1, "name": "Alice"}]
        self.error = error
        self.statements: list[str] = []

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def execute(self, statement: str) -> ExecutionResponse:
        self.statements.append(statement)
        if self.error:
            raise ExecutionError(self.error)
        columns = list(self.rows[0].keys()) if self.rows else []
        return ExecutionResponse(columns=columns, rows=self.rows, execution_time_ms=1.5)

    @property
    def backend_type(self) -> str:
        return "fake"


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for testing."""
    monkeypatch.setenv("PRIMARY_DB_TYPE", "sqlite")
    monkeypatch.setenv("SQLITE_URL", "sqlite+aiosqlite://")
    monkeypatch.setenv("STORAGE_TYPE", "memory")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("DEFAULT_LIMIT", raising=False)
    monkeypatch.delenv("MAX_HISTORY_ITEMS", raising=False)


@pytest.fixture
def make_backend():
    """Factory for FakeBackend instances with custom rows or a canned error."""
    return FakeBackend


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def app():
    """Create a test FastAPI app against an in-memory SQLite database."""
    from sql_workbench.app import create_app

    yield create_app()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with LifespanManager(app):
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            from sqlalchemy import text

            db = app.state.db_backend
            async with db._engine.begin() as conn:
                await conn.execute(
                    text(
                        "CREATE TABLE IF NOT EXISTS users "
                        "(id INTEGER PRIMARY KEY, name TEXT, active INTEGER)"
                    )
                )
                await conn.execute(text("INSERT INTO users VALUES (1, 'Alice', 1)"))
                await conn.execute(text("INSERT INTO users VALUES (2, 'Bob, Jr.', 0)"))
            yield c
