from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from sql_workbench.models.domain import HistoryEntry, QueryResult, Severity


class ValidationResponse(BaseModel):
    is_valid: bool
    severity: Severity
    message: str | None = None
    can_run: bool
    can_run_from_shortcut: bool


class QueryResponse(BaseModel):
    statement: str
    rewritten: bool = False
    result: QueryResult
    message: str = "Query executed successfully."


class HistoryResponse(BaseModel):
    entries: list[HistoryEntry] = Field(default_factory=list)
    total: int
    max_items: int


class ClearHistoryResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    backend: str
    uptime_seconds: float
    metrics: dict[str, Any]
