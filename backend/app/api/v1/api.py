"""Module: api."""

# backend/app/api/v1/api.py
from fastapi import APIRouter

# Operational routes (health/auth/scheduler hooks).
from app.api.v1.routes.health import router as health_router
from app.api.v1.routes.auth import router as auth_router
from app.api.v1.routes.worker import router as worker_router
from app.api.v1.routes.reports import router as reports_router

# Inventory routes used by the frontend.
from app.api.v1.routes.medications import router as medications_router
from app.api.v1.routes.doses import router as doses_router
from app.api.v1.routes.history import router as history_router


api_router = APIRouter()

# Register operational endpoints first for service-level concerns.
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(worker_router, prefix="/worker", tags=["worker"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])

# Register inventory endpoints, all behind the bearer token guard.
api_router.include_router(medications_router, prefix="/medications", tags=["medications"])
api_router.include_router(doses_router, prefix="/doses", tags=["doses"])
api_router.include_router(history_router, prefix="/history", tags=["history"])
