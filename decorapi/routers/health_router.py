from fastapi import APIRouter, Depends

from decorapi.config import Settings
from decorapi.deps import get_settings
from decorapi.schemas.health import HealthCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthCheckResponse:
    """Health check endpoint."""

    return HealthCheckResponse(service=settings.APP_NAME)
