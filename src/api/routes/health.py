"""Health check endpoint."""

from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_template_path
from api.models.responses import HealthResponse
from core.config import API_VERSION

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(template_path: Path = Depends(get_template_path)):
    """
    Report whether alfa reports can be generated.

    The only external asset is the report template; without it every upload
    fails, so the service reports 503.
    """
    health = HealthResponse(
        status="healthy",
        version=API_VERSION,
        template_available=template_path.exists(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    if health.template_available:
        return health

    health.status = "unhealthy"
    health.error = f"Report template {template_path.name} not found"
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=health.model_dump(),
    )
