from __future__ import annotations

import re
from typing import Protocol

from sql_workbench.errors import ExecutionError
from sql_workbench.guardrail.engine import DEFAULT_LIMIT, FORBIDDEN_KEYWORDS, MAX_LIMIT
from sql_workbench.models.domain import ExecutionResponse


class ExecutionBackend(Protocol):
    """Protocol for anything that can run a workbench statement."""

    async def connect(self) -> None: ...

    async def close(self) -> None: ...

    async def execute(self, statement: str) -> ExecutionResponse:
        """Run a read-only statement. Raises ExecutionError on any failure."""
        ...

    @property
    def backend_type(self) -> str: ...


# Quoted spans and comments, whichever starts first. Literal contents are
# blanked so they are never read as SQL.
_MASK_RE = re.compile(
    r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|/\*.*?\*/|--[^\n]*""",
    re.DOTALL,
)
# LIMIT n, LIMIT n OFFSET m, and the MySQL LIMIT offset, count form
_LIMIT_RE = re.compile(r"\bLIMIT\s+(\d+)(?:\s*,\s*(\d+))?", re.IGNORECASE)
_FORBIDDEN_RE = re.compile(r"\b(" + "|".join(FORBIDDEN_KEYWORDS) + r")\b", re.IGNORECASE)


def _mask(match: re.Match[str]) -> str:
    token = match.group(0)
    if token[0] in "'\"":
        return token[0] * 2
    return " "


def _paren_depth(sql: str, pos: int) -> int:
    return sql.count("(", 0, pos) - sql.count(")", 0, pos)


def enforce_read_only_policy(
    sql: str, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT
) -> str:
    """Authoritative server-side checks. Returns the statement to run.

    Unlike the client guardrail this matches keywords as whole words and
    ignores comments and string literals. Every LIMIT must stay within the
    maximum, and the outer query gets the default LIMIT when it has none of
    its own, even if a subquery is limited.
    """
    trimmed = sql.strip().rstrip(";").strip()
    if not trimmed:
        raise ExecutionError("SQL query cannot be empty")

    normalized = _MASK_RE.sub(_mask, trimmed).strip()

    if not normalized.upper().startswith("SELECT"):
        raise ExecutionError("Only SELECT queries are allowed for security reasons.")

    if ";" in normalized:
        raise ExecutionError("Multiple SQL statements are not allowed")

    match = _FORBIDDEN_RE.search(normalized)
    if match:
        raise ExecutionError(f"Forbidden keyword detected: {match.group(1).upper()}")

    outer_limited = False
    for limit_match in _LIMIT_RE.finditer(normalized):
        count = int(limit_match.group(2) or limit_match.group(1))
        if count > max_limit:
            raise ExecutionError(f"Query LIMIT exceeds maximum allowed ({max_limit})")
        if _paren_depth(normalized, limit_match.start()) == 0:
            outer_limited = True
    if outer_limited:
        return trimmed
    # Newline keeps a trailing line comment from swallowing the clause
    return f"{trimmed}\nLIMIT {min(default_limit, max_limit)}"
