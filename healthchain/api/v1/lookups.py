"""
==============================================================================
Lookup Endpoints
==============================================================================

Emergency access, form auto-fill and data vault lookups.

Each endpoint forwards one request to the demo backend and returns the
rendered result. Input errors come back as 400 responses carrying the
message the page shows as an alert.

==============================================================================
"""

from fastapi import APIRouter, Depends

from healthchain.schemas.portal import (
    FormAutofillRequest,
    FormAutofillResponse,
    IdentifierRequest,
    RenderedResponse,
)
from healthchain.services import PortalService, get_portal_service


router = APIRouter(tags=["Lookups"])


@router.post("/emergency", response_model=RenderedResponse)
async def emergency_access(
    request: IdentifierRequest,
    service: PortalService = Depends(get_portal_service)
):
    """
    Emergency medical data for a 12-digit identifier.

    Backend and network errors are rendered inline (success=false).
    """
    result = await service.emergency_lookup(request.identifier)
    return RenderedResponse(**result.model_dump(include={"success", "identifier", "html"}))


@router.post("/forms/autofill", response_model=FormAutofillResponse)
async def autofill_form(
    request: FormAutofillRequest,
    service: PortalService = Depends(get_portal_service)
):
    """Auto-fill form fields from the backend."""
    result = await service.autofill_form(request.identifier, request.form_type)
    return FormAutofillResponse(**result.model_dump())


@router.post("/vault", response_model=RenderedResponse)
async def view_vault(
    request: IdentifierRequest,
    service: PortalService = Depends(get_portal_service)
):
    """Data vault overview."""
    result = await service.view_vault(request.identifier)
    return RenderedResponse(**result.model_dump(include={"success", "identifier", "html"}))
