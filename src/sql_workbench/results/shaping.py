from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sql_workbench.models.domain import ExecutionResponse, QueryResult


def shape(raw_rows: Sequence[Mapping[str, Any]], elapsed_ms: float) -> QueryResult:
    """Build a display-ready result; columns come from the first row's keys."""
    rows = [dict(row) for row in raw_rows]
    columns = list(rows[0].keys()) if rows else []
    return QueryResult(
        columns=columns,
        rows=rows,
        execution_time_ms=max(elapsed_ms, 0.0),
        total_rows=len(rows),
    )


def from_response(response: ExecutionResponse) -> QueryResult:
    """Shape a backend response, preferring the column order the backend reported."""
    result = shape(response.rows, response.execution_time_ms)
    if response.columns:
        return result.model_copy(update={"columns": list(response.columns)})
    return result


def has_exportable_rows(result: QueryResult | None) -> bool:
    return result is not None and result.total_rows > 0
