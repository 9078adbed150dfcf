"""
==============================================================================
Portal Schemas Module
==============================================================================

Request and response schemas for the portal's JSON API.

Identifiers are validated by the service layer rather than here, so that
a bad identifier produces the same INVALID_IDENTIFIER error on every route.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class IdentifierRequest(BaseModel):
    """Lookup by identifier."""
    identifier: str = Field(default="", max_length=64)


class FormAutofillRequest(BaseModel):
    """Auto-fill a form for an identifier."""
    identifier: str = Field(default="", max_length=64)
    form_type: Optional[str] = Field(default=None, max_length=64)

    @field_validator("form_type")
    @classmethod
    def strip_form_type(cls, v: Optional[str]) -> Optional[str]:
        if v:
            v = v.strip()
            return v if v else None
        return None


class FrameRequest(BaseModel):
    """Single base64 encoded camera frame."""
    frame: str = Field(..., min_length=1)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class BackendStatusResponse(BaseModel):
    """Backend reachability shown at the top of the page."""
    online: bool
    status: Optional[str] = None
    color: str
    html: str


class RenderedResponse(BaseModel):
    """Rendered HTML fragment for a lookup."""
    success: bool = True
    identifier: str
    html: str


class FormAutofillResponse(BaseModel):
    """Fields auto-filled from the backend."""
    success: bool = True
    identifier: str
    form_type: str
    name: str = ""
    dob: str = ""
    address: str = ""
    time_saved: str = ""
    time_saved_text: str = ""


class ScanResultResponse(BaseModel):
    """Outcome of decoding one frame."""
    success: bool = True
    identifier: Optional[str] = None
    display: Optional[str] = None


class LastScannedResponse(BaseModel):
    """Last scanned identifier, if any."""
    success: bool = True
    identifier: Optional[str] = None
