from __future__ import annotations

from fastapi import APIRouter, Request

from sql_workbench.guardrail.engine import can_run, can_run_from_shortcut
from sql_workbench.models.requests import ValidateRequest
from sql_workbench.models.responses import ValidationResponse

router = APIRouter()


@router.post("/validate", response_model=ValidationResponse)
async def validate_sql(body: ValidateRequest, request: Request) -> ValidationResponse:
    """Classify SQL as the user types. Nothing is executed or recorded."""
    outcome = request.app.state.workbench.guardrail.classify(body.sql)
    return ValidationResponse(
        is_valid=outcome.is_valid,
        severity=outcome.severity,
        message=outcome.message,
        can_run=can_run(outcome),
        can_run_from_shortcut=can_run_from_shortcut(outcome),
    )
