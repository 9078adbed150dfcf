"""
==============================================================================
Utilities Package
==============================================================================

Modules:
--------
- validators: Identifier extraction and validation

==============================================================================
"""

from .validators import (
    IDENTIFIER_PATTERNS,
    IdentifierValidator,
    extract_identifier,
    normalize_identifier,
)

__all__ = [
    "IDENTIFIER_PATTERNS",
    "IdentifierValidator",
    "extract_identifier",
    "normalize_identifier",
]
