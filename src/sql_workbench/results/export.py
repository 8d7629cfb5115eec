from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sql_workbench.models.domain import QueryResult, binary_to_hex

CSV_MEDIA_TYPE = "text/csv"

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def _format_cell(value: Any) -> str:
    value = binary_to_hex(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        if any(ch in value for ch in _NEEDS_QUOTING):
            return '"' + value.replace('"', '""') + '"'
        return value
    return str(value)


def to_delimited_text(result: QueryResult) -> str:
    """Render a result as CSV: header line, then one line per row."""
    lines = [",".join(_format_cell(col) for col in result.columns)]
    for row in result.rows:
        lines.append(",".join(_format_cell(row.get(col)) for col in result.columns))
    return "\n".join(lines)


def export_filename(now: datetime | None = None) -> str:
    """``query_result_<ISO timestamp with ':' and '.' as '-'>.csv``."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"query_result_{stamp.replace(':', '-').replace('.', '-')}.csv"
