"""API v1 routes."""

from fastapi import APIRouter

from farmapp.api.v1 import (
    ai,
    auth,
    batches,
    clients,
    dashboard,
    expenses,
    farms,
    health,
    payments,
    sales,
    users,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(farms.router, prefix="/farms", tags=["farms"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(sales.router, prefix="/sales", tags=["sales"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(batches.router, prefix="/batches", tags=["batches"])
router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
