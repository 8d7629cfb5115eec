from __future__ import annotations

from sql_workbench.models.domain import ValidationOutcome


class WorkbenchError(Exception):
    """Base class for every error the workbench surfaces to a user."""


class GuardrailViolation(WorkbenchError):
    """A run was refused by the guardrail before reaching the executor."""

    def __init__(self, outcome: ValidationOutcome) -> None:
        super().__init__(outcome.message or "Query rejected")
        self.outcome = outcome


class ExecutionError(WorkbenchError):
    """The execution backend could not run the statement."""


class ExecutionInProgressError(WorkbenchError):
    """Another statement is still executing in this session."""
