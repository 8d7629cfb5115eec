from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

import structlog
from fastapi import FastAPI

from sql_workbench.api.router import api_router
from sql_workbench.config import get_settings
from sql_workbench.db.factory import create_database_backend
from sql_workbench.guardrail.engine import GuardrailEngine
from sql_workbench.history.factory import create_blob_store
from sql_workbench.history.store import HistoryStore
from sql_workbench.logging import setup_logging
from sql_workbench.mcp.tools import create_mcp_server
from sql_workbench.observability.metrics import WorkbenchMetrics
from sql_workbench.workbench.session import WorkbenchSession

logger = structlog.get_logger()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    mcp_server = create_mcp_server()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db_backend = await create_database_backend(settings)
        stores = await create_blob_store(
            settings.storage_type, settings.storage_sqlite_path
        )

        history = HistoryStore(
            stores["blob_store"],
            max_items=settings.max_history_items,
            key=settings.history_storage_key,
        )
        entries = await history.load()
        logger.info("history_loaded", entries=len(entries))

        metrics = WorkbenchMetrics()
        workbench = WorkbenchSession(
            backend=db_backend,
            history=history,
            guardrail=GuardrailEngine(default_limit=settings.default_limit),
            metrics=metrics,
        )

        app.state.settings = settings
        app.state.db_backend = db_backend
        app.state.history = history
        app.state.workbench = workbench
        app.state.metrics = metrics
        mcp_server.state = app.state  # type: ignore[attr-defined]

        yield

        await db_backend.close()
        if stores.get("cleanup"):
            await stores["cleanup"]()

    mcp_http_app = mcp_server.http_app(path="/")

    @asynccontextmanager
    async def combined_lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            await stack.enter_async_context(lifespan(app))
            await stack.enter_async_context(mcp_http_app.lifespan(mcp_http_app))
            yield

    app = FastAPI(
        title="SQL Workbench",
        version="0.1.0",
        description="Read-only SQL workbench with client-side guardrails, query history and CSV export",
        lifespan=combined_lifespan,
    )
    app.include_router(api_router, prefix="/api")
    app.mount("/mcp", mcp_http_app)

    return app


app = create_app()
