"""
==============================================================================
Health Check Endpoints
==============================================================================

Portal health and demo backend reachability.

==============================================================================
"""

from fastapi import APIRouter, Depends

from healthchain.schemas.portal import BackendStatusResponse
from healthchain.services import PortalService, get_portal_service
from healthchain.scanner import get_scanner_session


router = APIRouter(tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, service: PortalService):
        self._service = service

    async def get_health(self) -> dict:
        """Get full health status."""
        backend = await self._service.check_backend()
        session = get_scanner_session()

        overall = "healthy" if backend.online else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "backend": "healthy" if backend.online else "offline",
                "scanner": "active" if session.is_open else "idle"
            },
            "details": {
                "backend_status": backend.status
            }
        }


@router.get("/health")
async def health_check(service: PortalService = Depends(get_portal_service)):
    """
    Health check endpoint.

    Returns portal status including backend reachability.
    """
    controller = HealthController(service)
    return await controller.get_health()


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}


@router.get("/backend-status", response_model=BackendStatusResponse)
async def backend_status(service: PortalService = Depends(get_portal_service)):
    """Backend status line shown on page load."""
    status = await service.check_backend()
    return BackendStatusResponse(**status.model_dump())
