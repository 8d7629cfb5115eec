"""Client-side guardrail for SQL typed into the workbench.

This is a heuristic textual filter, not a parser and not a security boundary.
Checks run in a fixed order and the first one that fires decides the outcome:
empty -> forbidden keyword -> not a SELECT -> missing LIMIT -> possible full
table scan -> ready. Keyword matching is a plain substring scan over the
upper-cased text, so a column such as ``created_at`` trips the ``CREATE``
check. That false positive is a known trade-off of the approach.
"""

from __future__ import annotations

from sql_workbench.models.domain import PreparedStatement, Severity, ValidationOutcome

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

# Order matters: the first keyword found is the one reported.
FORBIDDEN_KEYWORDS: tuple[str, ...] = (
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "ALTER",
    "TRUNCATE",
    "GRANT",
    "REVOKE",
    "CREATE",
)

# Short LIMIT-ed queries without WHERE are likely scanning a whole table.
_FULL_SCAN_LENGTH_THRESHOLD = 50

READY_MESSAGE = "Ready to execute."
EMPTY_MESSAGE = "Query cannot be empty"
NOT_SELECT_MESSAGE = "Only SELECT statements are permitted."
FULL_SCAN_MESSAGE = "Full table scan warning: Consider adding a WHERE clause."


class GuardrailEngine:
    """Classifies SQL text and injects a default LIMIT before execution."""

    def __init__(self, default_limit: int = DEFAULT_LIMIT) -> None:
        if default_limit <= 0:
            raise ValueError("default_limit must be positive")
        self._default_limit = default_limit

    def classify(self, sql: str) -> ValidationOutcome:
        trimmed = sql.strip()
        upper = trimmed.upper()

        if not upper:
            return ValidationOutcome(
                is_valid=False, severity=Severity.ERROR, message=EMPTY_MESSAGE
            )

        keyword = next((k for k in FORBIDDEN_KEYWORDS if k in upper), None)
        if keyword is not None:
            return ValidationOutcome(
                is_valid=False,
                severity=Severity.ERROR,
                message=f'Security Risk: "{keyword}" is not allowed. Read-only mode.',
            )

        if not upper.startswith("SELECT"):
            return ValidationOutcome(
                is_valid=False, severity=Severity.ERROR, message=NOT_SELECT_MESSAGE
            )

        if "LIMIT" not in upper:
            return ValidationOutcome(
                is_valid=True,
                severity=Severity.WARNING,
                message=(
                    "Performance Warning: Missing LIMIT clause. "
                    f"Defaulting to LIMIT {self._default_limit}."
                ),
            )

        if "WHERE" not in upper and len(trimmed) < _FULL_SCAN_LENGTH_THRESHOLD:
            return ValidationOutcome(
                is_valid=True, severity=Severity.WARNING, message=FULL_SCAN_MESSAGE
            )

        return ValidationOutcome(is_valid=True, severity=Severity.INFO, message=READY_MESSAGE)

    def prepare_for_execution(self, sql: str) -> PreparedStatement:
        """Return the statement to dispatch, appending a LIMIT when none is present.

        The caller must show the returned statement in the editor before
        dispatching it, so what runs, what is recorded and what is displayed agree.
        """
        trimmed = sql.strip()
        if "LIMIT" in trimmed.upper():
            return PreparedStatement(statement=sql, rewritten=False)
        return PreparedStatement(
            statement=f"{trimmed}\nLIMIT {self._default_limit}", rewritten=True
        )


def can_run(outcome: ValidationOutcome) -> bool:
    """Whether the run button is enabled for this outcome."""
    return outcome.is_valid and outcome.severity != Severity.ERROR


def can_run_from_shortcut(outcome: ValidationOutcome) -> bool:
    """Keyboard-shortcut gate; re-checks the security message on its own."""
    if outcome.message and "Security" in outcome.message:
        return False
    return can_run(outcome)


_default_engine = GuardrailEngine()


def classify(sql: str) -> ValidationOutcome:
    return _default_engine.classify(sql)


def prepare_for_execution(sql: str) -> PreparedStatement:
    return _default_engine.prepare_for_execution(sql)
