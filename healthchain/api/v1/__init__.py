"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the portal's JSON API.

Routers:
--------
- health: Portal health and backend status
- lookups: Emergency access, form auto-fill, data vault
- scanner: QR decoding and last scanned identifier

==============================================================================
"""

from . import health, lookups, scanner

__all__ = ["health", "lookups", "scanner"]
