from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from sql_workbench.results.export import CSV_MEDIA_TYPE

router = APIRouter()


@router.get("/export")
async def export_results(request: Request) -> Response:
    """Download the last result as CSV."""
    try:
        filename, content = request.app.state.workbench.export_csv()
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return Response(
        content=content,
        media_type=f"{CSV_MEDIA_TYPE}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
