from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastmcp import Client
from sqlalchemy import text

from sql_workbench.db.sqlite import SqliteBackend
from sql_workbench.history.blob_store import InMemoryBlobStore
from sql_workbench.history.store import HistoryStore
from sql_workbench.mcp.tools import create_mcp_server
from sql_workbench.workbench.session import WorkbenchSession


@pytest.fixture
async def mcp_server():
    db_backend = SqliteBackend("sqlite+aiosqlite://")
    await db_backend.connect()
    async with db_backend._engine.begin() as conn:
        await conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)"))
        await conn.execute(text("INSERT INTO users (id, name) VALUES (1, 'Alice')"))
        await conn.execute(text("INSERT INTO users (id, name) VALUES (2, 'Bob')"))

    workbench = WorkbenchSession(backend=db_backend, history=HistoryStore(InMemoryBlobStore()))
    server = create_mcp_server()
    server.state = SimpleNamespace(workbench=workbench)
    yield server
    await db_backend.close()


@pytest.fixture
async def mcp_client(mcp_server):
    async with Client(mcp_server) as client:
        yield client


@pytest.mark.asyncio
async def test_mcp_server_registers_all_tools(mcp_client) -> None:
    tools = await mcp_client.list_tools()
    names = {t.name for t in tools}
    assert names == {"validate_sql", "run_query", "get_history", "clear_history"}


@pytest.mark.asyncio
async def test_validate_sql_tool(mcp_client) -> None:
    result = await mcp_client.call_tool("validate_sql", {"sql": "SELECT * FROM users"})
    data = result.structured_content
    assert data["severity"] == "warning"
    assert data["can_run"] is True


@pytest.mark.asyncio
async def test_run_query_tool_rewrites(mcp_client) -> None:
    result = await mcp_client.call_tool("run_query", {"sql": "SELECT id, name FROM users ORDER BY id"})
    data = result.structured_content
    assert data["statement"] == "SELECT id, name FROM users ORDER BY id\nLIMIT 100"
    assert data["rewritten"] is True
    assert data["columns"] == ["id", "name"]
    assert data["total_rows"] == 2


@pytest.mark.asyncio
async def test_run_query_tool_reports_guardrail_error(mcp_client) -> None:
    result = await mcp_client.call_tool("run_query", {"sql": "DROP TABLE users"})
    assert "Security Risk" in result.structured_content["error"]


@pytest.mark.asyncio
async def test_history_tools(mcp_client) -> None:
    await mcp_client.call_tool("run_query", {"sql": "SELECT name FROM users LIMIT 1"})
    history = (await mcp_client.call_tool("get_history", {})).structured_content
    assert history["total"] == 1
    assert history["entries"][0]["outcome"] == "success"

    await mcp_client.call_tool("clear_history", {})
    history = (await mcp_client.call_tool("get_history", {})).structured_content
    assert history["total"] == 0


@pytest.mark.asyncio
async def test_run_query_tool_binary_column(mcp_client) -> None:
    result = await mcp_client.call_tool("run_query", {"sql": "SELECT x'ff' AS b LIMIT 1"})
    assert result.structured_content["rows"] == [{"b": "ff"}]
