"""HTTP presentation layer - REST API routes."""

from fastapi import APIRouter

from boilerplate_api.presentation.http.health import router as health_router
from boilerplate_api.presentation.http.metrics import router as metrics_router
from boilerplate_api.presentation.http.users import router as users_router
from boilerplate_api.presentation.http.web import router as web_router
from boilerplate_api.presentation.http.webhooks import router as webhooks_router

# Main API router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(metrics_router, tags=["Metrics"])
api_router.include_router(webhooks_router, tags=["Webhooks"])
api_router.include_router(web_router, tags=["Web"])
api_router.include_router(users_router, tags=["Users"])

__all__ = ["api_router"]
