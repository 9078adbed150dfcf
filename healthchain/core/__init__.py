"""
==============================================================================
Core Package
==============================================================================

Core infrastructure for the portal.

Modules:
--------
- exceptions: AppException class and error factory functions

Usage:
------
    from healthchain.core import exceptions
    raise exceptions.invalid_identifier()

==============================================================================
"""

from .exceptions import (
    AppException,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "register_exception_handlers",
]
