"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

This package provides:
- Backend: Lenient models for demo backend payloads
- Portal: Request and response schemas for the JSON API

==============================================================================
"""

from .backend import (
    HealthPayload,
    EmergencyPayload,
    FormPayload,
    VaultPayload,
)
from .portal import (
    IdentifierRequest,
    FormAutofillRequest,
    FrameRequest,
    BackendStatusResponse,
    RenderedResponse,
    FormAutofillResponse,
    ScanResultResponse,
    LastScannedResponse,
)

__all__ = [
    # Backend
    "HealthPayload",
    "EmergencyPayload",
    "FormPayload",
    "VaultPayload",
    # Portal
    "IdentifierRequest",
    "FormAutofillRequest",
    "FrameRequest",
    "BackendStatusResponse",
    "RenderedResponse",
    "FormAutofillResponse",
    "ScanResultResponse",
    "LastScannedResponse",
]
