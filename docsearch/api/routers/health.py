"""
Health check API endpoint.

Routes: GET /health

System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends

from docsearch import __version__
from docsearch.configs import Settings, get_settings
from docsearch.models.common import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Report liveness, service name and package version."""
    return HealthResponse(status="healthy", service=settings.service_name, version=__version__)
