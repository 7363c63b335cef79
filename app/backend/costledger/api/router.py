"""Top-level API router."""

from fastapi import APIRouter

from costledger.api.routes.budgets import router as budgets_router
from costledger.api.routes.health import router as health_router
from costledger.api.routes.periods import router as periods_router
from costledger.api.routes.reports import router as reports_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(periods_router)
api_router.include_router(reports_router)
api_router.include_router(budgets_router)
