from __future__ import annotations

from datetime import datetime, timezone

import aiosqlite

_CREATE_BLOBS = """
CREATE TABLE IF NOT EXISTS blobs (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class SQLiteBlobStore:
    """Persistent blob store backed by SQLite via aiosqlite."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def init_db(self) -> None:
        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
        await self._db.execute(_CREATE_BLOBS)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def get(self, key: str) -> str | None:
        assert self._db is not None
        cursor = await self._db.execute("SELECT value FROM blobs WHERE key = ?", (key,))
        row = await cursor.fetchone()
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        assert self._db is not None
        await self._db.execute(
            "INSERT OR REPLACE INTO blobs (key, value, updated_at) VALUES (?, ?, ?)",
            (key, value, datetime.now(timezone.utc).isoformat()),
        )
        await self._db.commit()

    async def remove(self, key: str) -> None:
        assert self._db is not None
        await self._db.execute("DELETE FROM blobs WHERE key = ?", (key,))
        await self._db.commit()
