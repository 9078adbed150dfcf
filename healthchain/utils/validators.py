"""
==============================================================================
Identifier Validation Module
==============================================================================

Extraction and validation of 12-digit identifiers (Aadhaar numbers).

Scanned Text:
-------------
Decoded QR text is tested against an ordered list of patterns. The first
pattern whose match still holds exactly 12 digits after stripping every
non-digit character wins. Text that never qualifies is ignored.

Submitted Text:
---------------
Identifiers typed into a form must be exactly 12 digits once surrounding
whitespace is removed.

==============================================================================
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Tuple


IDENTIFIER_LENGTH = 12

# Order matters: labelled payloads first, then grouped digits, then bare digits.
IDENTIFIER_PATTERNS: List[Pattern[str]] = [
    re.compile(r"AADHAAR:(\d{12})", re.IGNORECASE),
    re.compile(r"UID:(\d{12})", re.IGNORECASE),
    re.compile(r"(\d{4}\s?\d{4}\s?\d{4})"),
    re.compile(r"^(\d{12})$"),
]

_NON_DIGITS = re.compile(r"\D")


def strip_non_digits(value: str) -> str:
    """Remove every character that is not a decimal digit."""
    return _NON_DIGITS.sub("", value)


def extract_identifier(
    text: Optional[str],
    patterns: Optional[List[Pattern[str]]] = None
) -> Optional[str]:
    """
    Extract a 12-digit identifier from decoded QR text.

    Args:
        text: Raw decoded text
        patterns: Ordered patterns to try (defaults to IDENTIFIER_PATTERNS)

    Returns:
        The 12 digits of the first qualifying match, or None

    Example:
        >>> extract_identifier("UID:123456789012")
        '123456789012'
        >>> extract_identifier("1234 5678 9012")
        '123456789012'
    """
    if not text:
        return None

    for pattern in patterns or IDENTIFIER_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        candidate = match.group(1) if match.groups() else match.group(0)
        digits = strip_non_digits(candidate or "")

        if len(digits) == IDENTIFIER_LENGTH:
            return digits

    return None


def normalize_identifier(raw: Optional[str]) -> str:
    """Trim a submitted identifier without further checks."""
    return (raw or "").strip()


class IdentifierValidator:
    """
    Validator for identifiers submitted through the lookup forms.

    Example:
        >>> validator = IdentifierValidator()
        >>> validator.validate(" 123456789012 ")
        (True, '123456789012', None)
    """

    PATTERN = re.compile(r"^\d{12}$")

    def validate(self, raw: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize an identifier.

        Args:
            raw: Identifier as typed by the user

        Returns:
            Tuple of (is_valid, normalized_identifier, error_message)
        """
        identifier = normalize_identifier(raw)

        if not identifier:
            return False, None, "Identifier is required"

        if len(identifier) != IDENTIFIER_LENGTH:
            return False, None, f"Identifier must be {IDENTIFIER_LENGTH} digits"

        if not self.PATTERN.match(identifier):
            return False, None, "Identifier can only contain digits"

        return True, identifier, None

    def is_valid(self, raw: Optional[str]) -> bool:
        """Quick validation check."""
        is_valid, _, _ = self.validate(raw)
        return is_valid
