from __future__ import annotations

import asyncio
from typing import Protocol


class BlobStore(Protocol):
    """Protocol for the key-value text store the history log is persisted to."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class InMemoryBlobStore:
    """Process-local blob store, used for development and tests."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._blobs.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._blobs[key] = value

    async def remove(self, key: str) -> None:
        async with self._lock:
            self._blobs.pop(key, None)
