from __future__ import annotations

from datetime import datetime

import structlog

from sql_workbench.db.base import ExecutionBackend
from sql_workbench.errors import ExecutionError, ExecutionInProgressError, GuardrailViolation
from sql_workbench.guardrail.engine import GuardrailEngine, can_run, can_run_from_shortcut
from sql_workbench.history.store import HistoryStore
from sql_workbench.models.domain import Outcome, QueryResult, ValidationOutcome
from sql_workbench.observability.metrics import WorkbenchMetrics
from sql_workbench.results.export import export_filename, to_delimited_text
from sql_workbench.results.shaping import from_response, has_exportable_rows

logger = structlog.get_logger()


class WorkbenchSession:
    """One user's editing session: statement, last result, history and run gating.

    At most one statement executes at a time. Statements refused by the
    guardrail never reach the backend and are not added to history.
    """

    def __init__(
        self,
        backend: ExecutionBackend,
        history: HistoryStore,
        guardrail: GuardrailEngine | None = None,
        metrics: WorkbenchMetrics | None = None,
    ) -> None:
        self._backend = backend
        self._history = history
        self._guardrail = guardrail or GuardrailEngine()
        self._metrics = metrics
        self._statement = ""
        self._validation = ValidationOutcome()
        self._result: QueryResult | None = None
        self._last_error: str | None = None
        self._rewritten = False
        self._in_flight = False

    @property
    def statement(self) -> str:
        return self._statement

    @property
    def validation(self) -> ValidationOutcome:
        return self._validation

    @property
    def result(self) -> QueryResult | None:
        return self._result

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def rewritten(self) -> bool:
        """Whether the last dispatched statement had a LIMIT appended."""
        return self._rewritten

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def guardrail(self) -> GuardrailEngine:
        return self._guardrail

    @property
    def is_running(self) -> bool:
        return self._in_flight

    @property
    def run_enabled(self) -> bool:
        return not self._in_flight and can_run(self._validation)

    @property
    def can_export(self) -> bool:
        return has_exportable_rows(self._result)

    def edit(self, sql: str) -> ValidationOutcome:
        """Replace the editable statement and reclassify it."""
        self._statement = sql
        self._validation = self._guardrail.classify(sql)
        return self._validation

    def select_history(self, entry_id: str) -> str:
        """Load a past statement back into the editor."""
        for entry in self._history.entries:
            if entry.id == entry_id:
                self.edit(entry.sql)
                return entry.sql
        raise KeyError(f"History entry {entry_id} not found")

    async def run(self, sql: str | None = None, *, from_shortcut: bool = False) -> QueryResult:
        """Execute the current statement (or ``sql``, which replaces it first)."""
        if self._in_flight:
            raise ExecutionInProgressError("A query is already running")
        self._in_flight = True
        try:
            return await self._run(sql, from_shortcut)
        finally:
            self._in_flight = False

    async def _run(self, sql: str | None, from_shortcut: bool) -> QueryResult:
        if sql is not None:
            self.edit(sql)

        allowed = (
            can_run_from_shortcut(self._validation)
            if from_shortcut
            else can_run(self._validation)
        )
        if not allowed:
            await self._count("queries_blocked")
            logger.info("query_blocked", message=self._validation.message)
            raise GuardrailViolation(self._validation)

        prepared = self._guardrail.prepare_for_execution(self._statement)
        if prepared.rewritten:
            # Show what is actually executed before dispatching it
            self.edit(prepared.statement)
            await self._count("queries_rewritten")
        statement = prepared.statement
        self._rewritten = prepared.rewritten

        self._result = None
        self._last_error = None
        await self._count("queries_total")
        try:
            response = await self._backend.execute(statement)
        except ExecutionError as e:
            self._last_error = str(e)
            await self._history.record(statement, Outcome.FAILURE)
            await self._count("queries_failed")
            raise

        self._result = from_response(response)
        await self._history.record(statement, Outcome.SUCCESS)
        await self._count("queries_executed")
        return self._result

    def export_csv(self, now: datetime | None = None) -> tuple[str, str]:
        """Return ``(filename, csv_text)`` for the last result."""
        result = self._result
        if result is None or not has_exportable_rows(result):
            raise LookupError("No results to export")
        return export_filename(now), to_delimited_text(result)

    async def _count(self, name: str) -> None:
        if self._metrics:
            await self._metrics.increment(name)
