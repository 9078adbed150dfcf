"""
==============================================================================
Services Package
==============================================================================

Business logic layer between the routes and the backend client.

==============================================================================
"""

from fastapi import Depends

from healthchain.client.backend import BackendClient, get_backend_client

from .portal_service import BackendStatus, FormAutofill, LookupResult, PortalService


def get_portal_service(
    client: BackendClient = Depends(get_backend_client)
) -> PortalService:
    """FastAPI dependency building the portal service."""
    return PortalService(client)


__all__ = [
    "BackendStatus",
    "FormAutofill",
    "LookupResult",
    "PortalService",
    "get_portal_service",
]
