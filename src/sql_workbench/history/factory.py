from __future__ import annotations

from typing import Any

from sql_workbench.config import StorageType
from sql_workbench.history.blob_store import InMemoryBlobStore
from sql_workbench.history.sqlite_blob_store import SQLiteBlobStore


async def create_blob_store(
    storage_type: StorageType | str, sqlite_path: str = "./workbench_state.db"
) -> dict[str, Any]:
    """Create the blob store the history log is persisted to.

    Returns dict with keys: blob_store, and an optional cleanup coroutine.
    """
    if StorageType(storage_type) == StorageType.SQLITE:
        blob_store = SQLiteBlobStore(sqlite_path)
        await blob_store.init_db()
        return {"blob_store": blob_store, "cleanup": blob_store.close}

    return {"blob_store": InMemoryBlobStore(), "cleanup": None}
