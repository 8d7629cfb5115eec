from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


def _now_ms() -> int:
    return int(time.time() * 1000)


class Severity(str, Enum):
    NONE = "none"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class ValidationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool = True
    severity: Severity = Severity.NONE
    message: str | None = None

    @model_validator(mode="after")
    def _errors_are_invalid(self) -> ValidationOutcome:
        if self.severity == Severity.ERROR and self.is_valid:
            raise ValueError("an error-severity outcome cannot be valid")
        return self


class PreparedStatement(BaseModel):
    model_config = ConfigDict(frozen=True)

    statement: str
    rewritten: bool = False


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sql: str
    timestamp: int = Field(default_factory=_now_ms)
    outcome: Outcome

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_status(cls, data: Any) -> Any:
        # Older blobs stored {"status": "success" | "error"}
        if isinstance(data, dict) and "outcome" not in data and "status" in data:
            data = dict(data)
            status = data.pop("status")
            data["outcome"] = "failure" if status == "error" else status
        return data


class ExecutionResponse(BaseModel):
    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    execution_time_ms: float = Field(default=0.0, ge=0)


class QueryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    execution_time_ms: float = Field(default=0.0, ge=0)
    total_rows: int = 0

    @field_serializer("rows", when_used="json")
    def _serialize_rows(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # Binary columns (BLOB, bytea) are not valid JSON text; send them as hex
        return [{k: binary_to_hex(v) for k, v in row.items()} for row in rows]


def binary_to_hex(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value
