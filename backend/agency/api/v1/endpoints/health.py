"""
Health check endpoint.
"""

from fastapi import APIRouter

from agency.schemas.health import HealthResponse
from agency.deps.di_container import get_container

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health() -> HealthResponse:
    """Uptime plus database and schema checks; needs no admin token."""
    controller = get_container().health_controller()
    return await controller.get_health()
