"""
==============================================================================
Page Routes
==============================================================================

Server-rendered portal page.

Every route renders the full dashboard template. The lookup routes fill one
result section; input and backend errors become an alert banner on the page.

==============================================================================
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from healthchain.config import get_settings
from healthchain.core.exceptions import AppException
from healthchain.rendering import DashboardView, render_dashboard
from healthchain.scanner import get_scanner_session
from healthchain.services import PortalService, get_portal_service


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)


class DashboardController:
    """Builds dashboard views for the page routes."""

    def __init__(self, service: PortalService):
        self._service = service
        self._settings = get_settings()

    async def base_view(self) -> DashboardView:
        """Dashboard with backend status and prefilled identifiers."""
        backend = await self._service.check_backend()
        scanned = get_scanner_session().last_scanned
        default_identifier = scanned or self._settings.demo_identifier

        return DashboardView(
            app_name=self._settings.app_name,
            backend_online=backend.online,
            backend_status=backend.status,
            backend_color=backend.color,
            emergency_identifier=default_identifier,
            form_identifier=default_identifier,
            form_type=self._settings.default_form_type,
            form_types=self._settings.form_types_list,
            vault_identifier=default_identifier,
            scanned_identifier=scanned,
            scanner_fps=self._settings.scanner_fps,
            scanner_box_size=self._settings.scanner_box_size,
        )

    async def home(self) -> DashboardView:
        view = await self.base_view()

        if self._settings.demo_autorun:
            await self._fill_emergency(view, self._settings.demo_identifier)

        return view

    async def emergency(self, identifier: Optional[str]) -> DashboardView:
        view = await self.base_view()
        view.emergency_identifier = identifier or ""
        await self._fill_emergency(view, identifier)
        return view

    async def forms(self, identifier: Optional[str], form_type: Optional[str]) -> DashboardView:
        view = await self.base_view()
        view.form_identifier = identifier or ""
        if form_type:
            view.form_type = form_type

        try:
            result = await self._service.autofill_form(identifier, form_type)
        except AppException as e:
            view.alert = e.message
            return view

        view.form_name = result.name
        view.form_dob = result.dob
        view.form_address = result.address
        view.time_saved = result.time_saved
        return view

    async def vault(self, identifier: Optional[str]) -> DashboardView:
        view = await self.base_view()
        view.vault_identifier = identifier or ""

        try:
            result = await self._service.view_vault(identifier)
        except AppException as e:
            view.alert = e.message
            return view

        view.vault = result.payload
        return view

    async def _fill_emergency(self, view: DashboardView, identifier: Optional[str]) -> None:
        try:
            result = await self._service.emergency_lookup(identifier)
        except AppException as e:
            view.alert = e.message
            return
        view.emergency = result.payload
        view.emergency_error = result.error


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    service: PortalService = Depends(get_portal_service)
):
    """Portal dashboard."""
    view = await DashboardController(service).home()
    return render_dashboard(request, view)


@router.get("/emergency", response_class=HTMLResponse)
async def emergency_page(
    request: Request,
    identifier: Optional[str] = Query(None),
    service: PortalService = Depends(get_portal_service)
):
    """Dashboard with emergency data."""
    view = await DashboardController(service).emergency(identifier)
    return render_dashboard(request, view)


@router.get("/forms", response_class=HTMLResponse)
async def forms_page(
    request: Request,
    identifier: Optional[str] = Query(None),
    form_type: Optional[str] = Query(None),
    service: PortalService = Depends(get_portal_service)
):
    """Dashboard with auto-filled form fields."""
    view = await DashboardController(service).forms(identifier, form_type)
    return render_dashboard(request, view)


@router.get("/vault", response_class=HTMLResponse)
async def vault_page(
    request: Request,
    identifier: Optional[str] = Query(None),
    service: PortalService = Depends(get_portal_service)
):
    """Dashboard with the data vault overview."""
    view = await DashboardController(service).vault(identifier)
    return render_dashboard(request, view)
