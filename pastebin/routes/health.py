"""
Health check route.
"""
from fastapi import APIRouter, Depends, Response

from pastebin.dependencies import get_manager
from pastebin.manager import PasteStoreManager
from pastebin.models import HealthCheck

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
async def health_check(
    response: Response,
    manager: PasteStoreManager = Depends(get_manager),
) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if the storage engine is reachable, 503 with ok=false otherwise.
    """
    is_healthy = manager.health_check()
    if not is_healthy:
        response.status_code = 503
    return HealthCheck(ok=is_healthy)
