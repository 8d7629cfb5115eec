from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from sql_workbench.errors import ExecutionError, ExecutionInProgressError, GuardrailViolation
from sql_workbench.models.requests import QueryRequest
from sql_workbench.models.responses import QueryResponse

router = APIRouter()


@router.post("/query", response_model=QueryResponse)
async def run_query(body: QueryRequest, request: Request) -> QueryResponse:
    """Run a statement through the guardrail and the execution backend.

    Statements without a LIMIT get the default one appended; the returned
    ``statement`` is exactly what was executed and recorded in history.
    """
    workbench = request.app.state.workbench
    try:
        result = await workbench.run(body.sql, from_shortcut=body.from_shortcut)
    except ExecutionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except GuardrailViolation as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ExecutionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return QueryResponse(
        statement=workbench.statement,
        rewritten=workbench.rewritten,
        result=result,
    )
