from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_empty_history(client: AsyncClient) -> None:
    response = await client.get("/api/history")
    assert response.status_code == 200
    data = response.json()
    assert data["entries"] == []
    assert data["total"] == 0
    assert data["max_items"] == 10


@pytest.mark.asyncio
async def test_history_after_query(client: AsyncClient) -> None:
    await client.post("/api/query", json={"sql": "SELECT * FROM users"})

    data = (await client.get("/api/history")).json()
    assert data["total"] == 1
    entry = data["entries"][0]
    assert entry["sql"] == "SELECT * FROM users\nLIMIT 100"
    assert entry["outcome"] == "success"
    assert entry["id"]
    assert isinstance(entry["timestamp"], int)


@pytest.mark.asyncio
async def test_history_deduplicates_and_caps(client: AsyncClient) -> None:
    for i in range(11):
        await client.post("/api/query", json={"sql": f"SELECT {i} AS n FROM users LIMIT 1"})
    await client.post("/api/query", json={"sql": "SELECT 5 AS n FROM users LIMIT 1"})

    data = (await client.get("/api/history")).json()
    assert data["total"] == 10
    sqls = [e["sql"] for e in data["entries"]]
    assert sqls[0] == "SELECT 5 AS n FROM users LIMIT 1"
    assert sqls.count("SELECT 5 AS n FROM users LIMIT 1") == 1
    assert "SELECT 0 AS n FROM users LIMIT 1" not in sqls


@pytest.mark.asyncio
async def test_clear_history(client: AsyncClient, app) -> None:
    await client.post("/api/query", json={"sql": "SELECT * FROM users LIMIT 1"})
    response = await client.delete("/api/history")
    assert response.status_code == 200
    assert response.json()["message"] == "History cleared"

    data = (await client.get("/api/history")).json()
    assert data["total"] == 0
    assert await app.state.history.load() == []
