"""
==============================================================================
Pages Package
==============================================================================

Server-rendered HTML routes.

==============================================================================
"""

from .routes import router as pages_router

__all__ = ["pages_router"]
