from __future__ import annotations

import structlog

from sql_workbench.db.engine import AsyncEngineBackend

logger = structlog.get_logger()


class SqliteBackend(AsyncEngineBackend):
    """SQLite database backend using SQLAlchemy async + aiosqlite."""

    backend_name = "sqlite"

    async def connect(self) -> None:
        await super().connect()
        logger.info("sqlite_connected", url=self._url)
