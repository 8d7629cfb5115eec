from __future__ import annotations

import asyncio

import structlog
from pydantic import TypeAdapter, ValidationError

from sql_workbench.history.blob_store import BlobStore
from sql_workbench.models.domain import HistoryEntry, Outcome

logger = structlog.get_logger()

DEFAULT_HISTORY_KEY = "dq_pro_history"
DEFAULT_MAX_ITEMS = 10

_log_adapter = TypeAdapter(list[HistoryEntry])


class HistoryStore:
    """Bounded, most-recent-first log of executed statements.

    At most one entry per distinct SQL text: recording a statement that is
    already present moves it to the front with a fresh id, timestamp and
    outcome. Every mutation rewrites the whole log to the blob store.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        max_items: int = DEFAULT_MAX_ITEMS,
        key: str = DEFAULT_HISTORY_KEY,
    ) -> None:
        if max_items <= 0:
            raise ValueError("max_items must be positive")
        self._blob_store = blob_store
        self._max_items = max_items
        self._key = key
        self._entries: list[HistoryEntry] = []
        self._lock = asyncio.Lock()

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    @property
    def max_items(self) -> int:
        return self._max_items

    async def record(self, sql: str, outcome: Outcome) -> HistoryEntry:
        entry = HistoryEntry(sql=sql, outcome=outcome)
        async with self._lock:
            remaining = [e for e in self._entries if e.sql != sql]
            self._entries = [entry, *remaining][: self._max_items]
            await self._save()
        logger.info(
            "history_recorded",
            entry_id=entry.id,
            outcome=entry.outcome.value,
            size=len(self._entries),
        )
        return entry

    async def clear(self) -> None:
        async with self._lock:
            self._entries = []
            try:
                await self._blob_store.remove(self._key)
            except Exception:
                logger.warning("history_blob_remove_failed", key=self._key, exc_info=True)
        logger.info("history_cleared")

    async def load(self) -> list[HistoryEntry]:
        """Replace the in-memory log with the persisted one.

        A missing, corrupt or unreadable blob yields an empty log.
        """
        async with self._lock:
            self._entries = await self._read()
            return list(self._entries)

    async def _read(self) -> list[HistoryEntry]:
        try:
            raw = await self._blob_store.get(self._key)
        except Exception:
            logger.warning("history_blob_unavailable", key=self._key, exc_info=True)
            return []
        if not raw:
            return []
        try:
            entries = _log_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("history_blob_corrupt", key=self._key, error_count=e.error_count())
            return []
        return entries[: self._max_items]

    async def _save(self) -> None:
        payload = _log_adapter.dump_json(self._entries).decode("utf-8")
        try:
            await self._blob_store.set(self._key, payload)
        except Exception:
            logger.warning("history_blob_write_failed", key=self._key, exc_info=True)
