"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

A single cached Settings instance is shared by the whole portal: the
backend client, the scanner and the page renderer all read from it.

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Demo Backend:
-------------
The portal talks to an external demo backend (by default on port 8000).
The hospital key is a simulated access key and is not a secret.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the portal
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Portal bind address
        port: Portal port number
        api_base: Base URL of the demo backend
        hospital_key: Simulated access key for emergency lookups
        request_timeout_seconds: Backend request timeout
        demo_identifier: Identifier prefilled in every form
        demo_autorun: Render the demo emergency lookup on first page load
        default_form_type: Form type selected by default
        form_types: Form types offered for auto-fill
        scanner_fps: Camera frame rate while scanning
        scanner_box_size: Side of the square scan region in pixels
        camera_probe_limit: Number of camera indices probed
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> print(settings.api_base)
        'http://localhost:8000'
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="HealthChain Portal",
        description="Display name for the portal"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Portal bind address"
    )

    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Portal port number"
    )

    # =========================================================================
    # BACKEND SETTINGS
    # =========================================================================
    api_base: str = Field(
        default="http://localhost:8000",
        description="Base URL of the demo backend"
    )

    hospital_key: str = Field(
        default="HOSPITAL123",
        description="Simulated access key sent with emergency lookups"
    )

    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Backend request timeout in seconds"
    )

    # =========================================================================
    # DEMO SETTINGS
    # =========================================================================
    demo_identifier: str = Field(
        default="123456789012",
        description="Identifier prefilled in every form"
    )

    demo_autorun: bool = Field(
        default=False,
        description="Run the emergency lookup for the demo identifier on page load"
    )

    default_form_type: str = Field(
        default="hospital_admission",
        description="Form type selected by default"
    )

    form_types: str = Field(
        default='["hospital_admission", "insurance_claim", "bank_kyc"]',
        description="Form types offered for auto-fill as JSON array string"
    )

    # =========================================================================
    # SCANNER SETTINGS
    # =========================================================================
    scanner_fps: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Camera frame rate while scanning"
    )

    scanner_box_size: int = Field(
        default=250,
        ge=50,
        le=2000,
        description="Side of the square scan region in pixels"
    )

    camera_probe_limit: int = Field(
        default=5,
        ge=1,
        le=32,
        description="Number of camera device indices probed"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown environments fall back to development.
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("api_base")
    @classmethod
    def validate_api_base(cls, value: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        value = value.strip()

        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_base must be an http(s) URL: {value}")

        return value.rstrip("/")

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from JSON string to list."""
        return self._parse_json_list(self.cors_origins, ["*"], "CORS origins")

    @property
    def form_types_list(self) -> List[str]:
        """Parse offered form types from JSON string to list."""
        return self._parse_json_list(
            self.form_types, [self.default_form_type], "form types"
        )

    @staticmethod
    def _parse_json_list(raw: str, fallback: List[str], label: str) -> List[str]:
        try:
            values = json.loads(raw)
            if isinstance(values, list):
                return [str(v) for v in values]
            return fallback
        except json.JSONDecodeError:
            logger.warning(f"Invalid {label} JSON: {raw}, defaulting to {fallback}")
            return fallback

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"api_base={self.api_base!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
