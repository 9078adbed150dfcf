"""
==============================================================================
Card Rendering Module
==============================================================================

HTML fragments for the JSON API, rendered from the macros in
templates/cards.html. The dashboard page calls the same macros directly.

==============================================================================
"""

from __future__ import annotations

from healthchain.scanner.models import ScannerStatus
from healthchain.schemas.backend import EmergencyPayload, VaultPayload

from .templates import env


def _macros():
    return env.get_template("cards.html").module


# =============================================================================
# STATUS & FEEDBACK
# =============================================================================

def render_backend_status(online: bool, status: str = "") -> str:
    """Backend status line."""
    return str(_macros().backend_status(online, status))


def render_error(message: str, prefix: str = "❌") -> str:
    return str(_macros().error(message, prefix))


def render_time_saved(value: str) -> str:
    return str(_macros().time_saved(value))


def render_scanner_status(status: ScannerStatus) -> str:
    return str(_macros().scanner_status(status))


# =============================================================================
# CARDS
# =============================================================================

def render_emergency_card(payload: EmergencyPayload) -> str:
    """Emergency medical data card."""
    return str(_macros().emergency_card(payload))


def render_vault_card(payload: VaultPayload) -> str:
    """Data vault overview card."""
    return str(_macros().vault_card(payload))
