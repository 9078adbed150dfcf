"""
==============================================================================
Client Package
==============================================================================

HTTP access to the demo backend.

==============================================================================
"""

from .backend import BackendClient, close_backend_client, get_backend_client

__all__ = ["BackendClient", "close_backend_client", "get_backend_client"]
