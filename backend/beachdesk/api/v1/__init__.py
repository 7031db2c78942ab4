"""Versioned API router."""

from fastapi import APIRouter

from . import (
    availability,
    backup,
    clients,
    establishment,
    health,
    payments,
    pool,
    pricing,
    reports,
    rentals,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(establishment.router, prefix="/establishment", tags=["establishment"])
router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
router.include_router(rentals.router, prefix="/rentals", tags=["rentals"])
router.include_router(availability.router, prefix="/availability", tags=["availability"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(pool.router, prefix="/pool", tags=["pool"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(backup.router, prefix="/backup", tags=["backup"])

__all__ = ["router"]
