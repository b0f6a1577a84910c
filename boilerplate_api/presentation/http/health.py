"""Health check endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from boilerplate_api.infrastructure.database import Database, get_database

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns service status without checking dependencies.
    Use /ready for full readiness check.
    """
    return HealthResponse(status="ok")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    database: Database = Depends(get_database),
) -> JSONResponse:
    """Readiness check endpoint.

    Verifies all dependencies are available:
    - Database connection
    """
    checks = {"database": await database.ping()}
    ready = all(checks.values())

    return JSONResponse(
        status_code=200 if ready else 503,
        content=ReadinessResponse(ready=ready, checks=checks).model_dump(),
    )
