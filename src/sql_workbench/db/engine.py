from __future__ import annotations

import asyncio
import time
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from sql_workbench.db.base import enforce_read_only_policy
from sql_workbench.errors import ExecutionError
from sql_workbench.guardrail.engine import DEFAULT_LIMIT, MAX_LIMIT
from sql_workbench.models.domain import ExecutionResponse

logger = structlog.get_logger()


class AsyncEngineBackend:
    """Shared execution path for SQLAlchemy async backends."""

    backend_name = "sqlalchemy"

    def __init__(
        self,
        url: str,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
        timeout_seconds: float | None = None,
    ) -> None:
        self._url = url
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._timeout_seconds = timeout_seconds
        self._engine: AsyncEngine | None = None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(self._url, echo=False)

    async def connect(self) -> None:
        self._engine = self._create_engine()

    async def close(self) -> None:
        if self._engine:
            await self._engine.dispose()

    async def execute(self, statement: str) -> ExecutionResponse:
        assert self._engine is not None
        sql = enforce_read_only_policy(statement, self._default_limit, self._max_limit)

        start = time.perf_counter()
        try:
            columns, rows = await asyncio.wait_for(
                self._run(sql), timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError as e:
            logger.warning("query_timeout", backend=self.backend_type, timeout=self._timeout_seconds)
            raise ExecutionError(
                f"Database query failed: timed out after {self._timeout_seconds}s"
            ) from e
        except SQLAlchemyError as e:
            logger.warning("query_failed", backend=self.backend_type, error=str(e))
            message = str(getattr(e, "orig", None) or e)
            raise ExecutionError(f"Database query failed: {message}") from e
        except OSError as e:
            # Connection errors from the driver are not wrapped by SQLAlchemy
            logger.warning("database_unreachable", backend=self.backend_type, error=str(e))
            raise ExecutionError(f"Database query failed: {e}") from e
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

        logger.info(
            "query_executed",
            backend=self.backend_type,
            row_count=len(rows),
            execution_time_ms=elapsed_ms,
        )
        return ExecutionResponse(columns=columns, rows=rows, execution_time_ms=elapsed_ms)

    async def _run(self, sql: str) -> tuple[list[str], list[dict[str, Any]]]:
        assert self._engine is not None
        async with self._engine.connect() as conn:
            # Driver-level execution: no bind-parameter parsing of ':' or '%'
            result = await conn.exec_driver_sql(sql)
            columns = list(result.keys())
            rows = [dict(row._mapping) for row in result]
        return columns, rows

    @property
    def backend_type(self) -> str:
        return self.backend_name
