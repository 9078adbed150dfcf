"""
==============================================================================
Settings Tests
==============================================================================
"""

import pytest
from pydantic import ValidationError

from healthchain.config.settings import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.hospital_key == "HOSPITAL123"
        assert settings.form_types_list == ["hospital_admission", "insurance_claim", "bank_kyc"]
        assert settings.cors_origins_list == ["*"]

    def test_api_base_from_environment(self, monkeypatch):
        monkeypatch.setenv("API_BASE", "http://demo-backend:9000/")
        assert Settings().api_base == "http://demo-backend:9000"

    def test_api_base_requires_http(self):
        with pytest.raises(ValidationError):
            Settings(api_base="ftp://backend")

    def test_unknown_environment_falls_back(self):
        settings = Settings(app_env="Nowhere")
        assert settings.app_env == "development"
        assert settings.is_development

    def test_invalid_form_types_fall_back_to_default(self):
        settings = Settings(form_types="not json", default_form_type="bank_kyc")
        assert settings.form_types_list == ["bank_kyc"]
