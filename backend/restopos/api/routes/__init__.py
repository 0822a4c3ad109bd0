"""API routes."""

from fastapi import APIRouter

from restopos.api.routes import (
    ai,
    auth,
    config,
    customers,
    menu,
    orders,
    reports,
    staff,
    tables,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(menu.router, prefix="/menu", tags=["menu"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(config.router, prefix="/config", tags=["config"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
