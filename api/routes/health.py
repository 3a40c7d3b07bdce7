"""
Health check endpoints.

Provides endpoints for monitoring application health.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    providers: str


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether storage and the model provider are configured.
    """
    settings = get_settings()
    database = "configured" if settings.supabase_url and settings.supabase_service_role_key else "missing"
    providers = "configured" if settings.openai_api_key else "missing"
    ready = database == "configured" and providers == "configured"
    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        database=database,
        providers=providers,
    )
