from __future__ import annotations

from fastapi import APIRouter

from sql_workbench.api.export import router as export_router
from sql_workbench.api.health import router as health_router
from sql_workbench.api.history import router as history_router
from sql_workbench.api.query import router as query_router
from sql_workbench.api.validate import router as validate_router

api_router = APIRouter()
api_router.include_router(validate_router, tags=["validation"])
api_router.include_router(query_router, tags=["query"])
api_router.include_router(history_router, tags=["history"])
api_router.include_router(export_router, tags=["export"])
api_router.include_router(health_router, tags=["health"])
