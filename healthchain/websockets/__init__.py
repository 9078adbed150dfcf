"""
==============================================================================
WebSocket Package
==============================================================================

Real-time WebSocket handlers.

Handlers:
---------
- scanner: Live QR scanning from pushed camera frames

==============================================================================
"""

from .scanner import router as scanner_router

__all__ = ["scanner_router"]
