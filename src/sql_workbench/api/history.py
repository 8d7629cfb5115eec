from __future__ import annotations

from fastapi import APIRouter, Request

from sql_workbench.models.responses import ClearHistoryResponse, HistoryResponse

router = APIRouter()


@router.get("/history", response_model=HistoryResponse)
async def query_history(request: Request) -> HistoryResponse:
    """Recent statements, most recent first."""
    store = request.app.state.workbench.history
    entries = store.entries
    return HistoryResponse(entries=entries, total=len(entries), max_items=store.max_items)


@router.delete("/history", response_model=ClearHistoryResponse)
async def clear_history(request: Request) -> ClearHistoryResponse:
    await request.app.state.workbench.history.clear()
    return ClearHistoryResponse(message="History cleared")
