"""API routes package."""

from fastapi import APIRouter

from app.api.routes import (
    auth,
    health,
    reports,
    users,
    vehicles,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(vehicles.router, prefix="/vehicles", tags=["Vehicles"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
