"""
==============================================================================
Identifier Validation Tests
==============================================================================

Tests for identifier extraction from scanned text and form validation.

==============================================================================
"""

import pytest

from healthchain.utils.validators import (
    IdentifierValidator,
    extract_identifier,
    normalize_identifier,
    strip_non_digits,
)


class TestExtractIdentifier:
    """Tests for extracting identifiers from decoded QR text."""

    @pytest.mark.parametrize("text", [
        "AADHAAR:123456789012",
        "aadhaar:123456789012",
        "UID:123456789012",
        "uid:123456789012",
        "1234 5678 9012",
        "123456789012",
        "<PrintLetterBarcodeData uid=\"123456789012\" name=\"Ravi\"/>",
    ])
    def test_accepts_supported_formats(self, text: str):
        assert extract_identifier(text) == "123456789012"

    @pytest.mark.parametrize("text", [
        "",
        None,
        "12345",
        "AADHAAR:12345678901",
        "1234-5678-9012",
        "https://example.com/verify",
    ])
    def test_rejects_short_or_malformed_text(self, text):
        assert extract_identifier(text) is None

    def test_labelled_match_wins_over_grouped_digits(self):
        """The first pattern in the ordered list wins."""
        text = "1111 2222 3333 UID:444455556666"
        assert extract_identifier(text) == "444455556666"

    def test_aadhaar_label_wins_over_uid_label(self):
        text = "UID:444455556666 AADHAAR:111122223333"
        assert extract_identifier(text) == "111122223333"

    def test_result_contains_digits_only(self):
        identifier = extract_identifier("ID 1234 5678 9012 issued 2020")
        assert identifier == "123456789012"
        assert identifier.isdigit()

    def test_strip_non_digits(self):
        assert strip_non_digits("12a3 4-5") == "12345"


class TestIdentifierValidator:
    """Tests for identifiers typed into the lookup forms."""

    def test_valid_identifier_is_trimmed(self):
        validator = IdentifierValidator()
        assert validator.validate(" 123456789012 ") == (True, "123456789012", None)

    @pytest.mark.parametrize("raw, message", [
        ("", "Identifier is required"),
        (None, "Identifier is required"),
        ("12345678901", "Identifier must be 12 digits"),
        ("1234 5678 9012", "Identifier must be 12 digits"),
        ("12345678901a", "Identifier can only contain digits"),
    ])
    def test_invalid_identifiers(self, raw, message):
        is_valid, normalized, error = IdentifierValidator().validate(raw)
        assert is_valid is False
        assert normalized is None
        assert error == message

    def test_is_valid(self):
        validator = IdentifierValidator()
        assert validator.is_valid("123456789012")
        assert not validator.is_valid("abc")

    def test_normalize_identifier(self):
        assert normalize_identifier("  abc ") == "abc"
        assert normalize_identifier(None) == ""
