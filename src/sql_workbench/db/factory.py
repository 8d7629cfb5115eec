from __future__ import annotations

from sql_workbench.config import DatabaseType, Settings
from sql_workbench.db.base import ExecutionBackend
from sql_workbench.db.postgres import PostgresBackend
from sql_workbench.db.sqlite import SqliteBackend


async def create_database_backend(settings: Settings) -> ExecutionBackend:
    """Create and connect the execution backend selected by config."""
    backend: ExecutionBackend
    options = {
        "default_limit": settings.default_limit,
        "max_limit": settings.max_limit,
        "timeout_seconds": settings.db_query_timeout_seconds,
    }
    match settings.primary_db_type:
        case DatabaseType.POSTGRES:
            backend = PostgresBackend(settings.postgres_url, **options)
        case DatabaseType.SQLITE:
            backend = SqliteBackend(settings.sqlite_url, **options)

    await backend.connect()
    return backend
