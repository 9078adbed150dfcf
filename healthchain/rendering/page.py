"""
==============================================================================
Dashboard Page Module
==============================================================================

Full-page rendering for the server-side portal.

The page holds three GET forms (emergency access, form auto-fill, data
vault), the backend status line and the QR scanner modal. Result sections
are rendered by the macros in templates/cards.html.

==============================================================================
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import Request
from pydantic import BaseModel, Field

from healthchain.schemas.backend import EmergencyPayload, VaultPayload

from .templates import templates


class DashboardView(BaseModel):
    """Everything the dashboard template needs."""

    app_name: str
    backend_online: bool = False
    backend_status: Optional[str] = None
    backend_color: str = "red"

    emergency_identifier: str = ""
    emergency: Optional[EmergencyPayload] = None
    emergency_error: Optional[str] = None

    form_identifier: str = ""
    form_type: str = ""
    form_types: List[str] = Field(default_factory=list)
    form_name: str = ""
    form_dob: str = ""
    form_address: str = ""
    time_saved: str = ""

    vault_identifier: str = ""
    vault: Optional[VaultPayload] = None

    alert: Optional[str] = None
    scanned_identifier: Optional[str] = None
    scanner_fps: int = 10
    scanner_box_size: int = 250


def render_dashboard(request: Request, view: DashboardView):
    """Render the full portal page."""
    return templates.TemplateResponse(request, "dashboard.html", {"view": view})
