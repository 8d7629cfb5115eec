from __future__ import annotations

from pydantic import BaseModel, Field


class ValidateRequest(BaseModel):
    sql: str = Field(default="", max_length=100_000, description="SQL text as typed")


class QueryRequest(BaseModel):
    sql: str = Field(..., max_length=100_000, description="SQL statement to execute")
    from_shortcut: bool = Field(
        default=False, description="Run was triggered by the keyboard shortcut"
    )
