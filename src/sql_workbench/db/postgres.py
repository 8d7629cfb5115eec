from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from sql_workbench.db.engine import AsyncEngineBackend

logger = structlog.get_logger()


class PostgresBackend(AsyncEngineBackend):
    """PostgreSQL database backend using SQLAlchemy async + asyncpg."""

    backend_name = "postgres"

    def _create_engine(self) -> AsyncEngine:
        # Sessions are read-only at the server too, not just by policy here
        return create_async_engine(
            self._url,
            echo=False,
            pool_pre_ping=True,
            connect_args={"server_settings": {"default_transaction_read_only": "on"}},
        )

    async def connect(self) -> None:
        await super().connect()
        logger.info("postgres_connected", url=self._url.split("@")[-1])
