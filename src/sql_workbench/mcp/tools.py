from __future__ import annotations

from fastmcp import FastMCP

from sql_workbench.errors import WorkbenchError
from sql_workbench.guardrail.engine import can_run, can_run_from_shortcut


def create_mcp_server() -> FastMCP:
    """Create the MCP server exposing the workbench session as tools."""
    mcp = FastMCP("SQL Workbench Tools")

    @mcp.tool()
    async def validate_sql(sql: str) -> dict:
        """Check a SQL statement against the read-only guardrail without running it.

        Args:
            sql: The SQL statement to classify.
        """
        outcome = mcp.state.workbench.guardrail.classify(sql)
        return {
            "is_valid": outcome.is_valid,
            "severity": outcome.severity.value,
            "message": outcome.message,
            "can_run": can_run(outcome),
            "can_run_from_shortcut": can_run_from_shortcut(outcome),
        }

    @mcp.tool()
    async def run_query(sql: str) -> dict:
        """Run a read-only SELECT statement and return its rows.

        A LIMIT clause is appended when the statement has none; the returned
        ``statement`` is what actually ran.

        Args:
            sql: The SELECT statement to execute.
        """
        workbench = mcp.state.workbench
        try:
            result = await workbench.run(sql)
        except WorkbenchError as e:
            return {"statement": workbench.statement, "error": str(e)}
        return {
            "statement": workbench.statement,
            "rewritten": workbench.rewritten,
            **result.model_dump(mode="json"),
        }

    @mcp.tool()
    async def get_history() -> dict:
        """List recently executed statements, most recent first."""
        entries = mcp.state.workbench.history.entries
        return {
            "entries": [e.model_dump(mode="json") for e in entries],
            "total": len(entries),
        }

    @mcp.tool()
    async def clear_history() -> dict:
        """Remove every entry from the query history."""
        await mcp.state.workbench.history.clear()
        return {"message": "History cleared"}

    return mcp
