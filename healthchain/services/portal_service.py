"""
==============================================================================
Portal Service Module
==============================================================================

One request/render round trip per portal action.

Each action builds a backend call from user input, awaits the JSON response,
branches on its "error" field and renders the result.

Error Behaviour:
----------------
- check_backend:     never raises; offline status instead
- emergency_lookup:  bad identifier raises; backend and network errors are
                     rendered inline
- autofill_form:     bad input, backend errors and network errors raise
- view_vault:        bad input, backend errors and network errors raise

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from healthchain.client.backend import BackendClient
from healthchain.config import get_settings
from healthchain.core import exceptions
from healthchain.core.exceptions import AppException
from healthchain.rendering import cards
from healthchain.schemas.backend import (
    BackendPayload,
    EmergencyPayload,
    FormPayload,
    HealthPayload,
    VaultPayload,
)
from healthchain.utils.validators import IdentifierValidator, normalize_identifier


# Module logger
logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


# =============================================================================
# RESULT MODELS
# =============================================================================

class BackendStatus(BaseModel):
    """Backend reachability."""
    online: bool
    status: Optional[str] = None
    color: str
    html: str


class LookupResult(BaseModel):
    """
    Lookup outcome (emergency card, vault card or inline error).

    payload holds the parsed backend data on success, error the inline
    message otherwise; html is the rendered fragment for either.
    """
    success: bool
    identifier: str
    html: str
    payload: Optional[BackendPayload] = None
    error: Optional[str] = None


class FormAutofill(BaseModel):
    """Values to place into the form inputs."""
    identifier: str
    form_type: str
    name: str = ""
    dob: str = ""
    address: str = ""
    time_saved: str = ""
    time_saved_text: str = ""


# =============================================================================
# SERVICE
# =============================================================================

class PortalService:
    """
    Orchestrates backend calls and rendering for the portal.

    Example:
        >>> service = PortalService(get_backend_client())
        >>> result = await service.emergency_lookup("123456789012")
        >>> "emergency-card" in result.html
        True
    """

    def __init__(self, client: BackendClient) -> None:
        self._client = client
        self._settings = get_settings()
        self._validator = IdentifierValidator()

    # =========================================================================
    # BACKEND STATUS
    # =========================================================================

    async def check_backend(self) -> BackendStatus:
        """Ping the backend health endpoint."""
        try:
            data = await self._client.health()
            payload = self._parse(HealthPayload, data)
        except AppException as e:
            logger.warning(f"⚠️ Backend offline: {e.message}")
            return BackendStatus(
                online=False,
                color="red",
                html=cards.render_backend_status(False),
            )

        return BackendStatus(
            online=True,
            status=payload.status,
            color="green",
            html=cards.render_backend_status(True, payload.status),
        )

    # =========================================================================
    # EMERGENCY ACCESS
    # =========================================================================

    async def emergency_lookup(self, raw_identifier: Optional[str]) -> LookupResult:
        """
        Fetch and render emergency medical data.

        Raises:
            AppException: INVALID_IDENTIFIER unless exactly 12 digits
        """
        is_valid, identifier, error = self._validator.validate(raw_identifier)
        if not is_valid:
            logger.info(f"Rejected emergency identifier: {error}")
            raise exceptions.invalid_identifier()

        try:
            data = await self._client.emergency(identifier)
            error_message = self._error_of(data)
            if not error_message:
                payload = self._parse(EmergencyPayload, data)
        except AppException as e:
            error_message = f"Error: {e.message}"

        if error_message:
            return LookupResult(
                success=False,
                identifier=identifier,
                html=cards.render_error(error_message),
                error=error_message,
            )

        logger.info("🏥 Emergency data rendered")
        return LookupResult(
            success=True,
            identifier=identifier,
            html=cards.render_emergency_card(payload),
            payload=payload,
        )

    # =========================================================================
    # FORM AUTO-FILL
    # =========================================================================

    async def autofill_form(
        self,
        raw_identifier: Optional[str],
        form_type: Optional[str] = None
    ) -> FormAutofill:
        """
        Fetch auto-fill values for a form.

        Raises:
            AppException: IDENTIFIER_REQUIRED, INVALID_FORM_TYPE,
                BACKEND_ERROR or BACKEND_UNAVAILABLE
        """
        identifier = normalize_identifier(raw_identifier)
        if not identifier:
            raise exceptions.identifier_required("Please enter Aadhaar number")

        form_type = (form_type or self._settings.default_form_type).strip()
        if form_type not in self._settings.form_types_list:
            raise exceptions.invalid_form_type(form_type)

        data = await self._client.forms(identifier, form_type)
        error_message = self._error_of(data)
        if error_message:
            raise exceptions.backend_error(error_message)

        payload = self._parse(FormPayload, data)
        fields = payload.auto_filled

        logger.info(f"📝 Form auto-filled: {form_type}")
        return FormAutofill(
            identifier=identifier,
            form_type=form_type,
            name=fields.name,
            dob=fields.dob,
            address=fields.address,
            time_saved=payload.time_saved,
            time_saved_text=cards.render_time_saved(payload.time_saved),
        )

    # =========================================================================
    # DATA VAULT
    # =========================================================================

    async def view_vault(self, raw_identifier: Optional[str]) -> LookupResult:
        """
        Fetch and render the data vault overview.

        Raises:
            AppException: IDENTIFIER_REQUIRED, BACKEND_ERROR or BACKEND_UNAVAILABLE
        """
        identifier = normalize_identifier(raw_identifier)
        if not identifier:
            raise exceptions.identifier_required("Enter Aadhaar to view vault")

        data = await self._client.vault(identifier)
        error_message = self._error_of(data)
        if error_message:
            raise exceptions.backend_error(error_message)

        payload = self._parse(VaultPayload, data)

        logger.info("🔐 Vault rendered")
        return LookupResult(
            success=True,
            identifier=identifier,
            html=cards.render_vault_card(payload),
            payload=payload,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _error_of(data: Dict[str, Any]) -> Optional[str]:
        error = data.get("error")
        return str(error) if error else None

    @staticmethod
    def _parse(model: Type[PayloadT], data: Dict[str, Any]) -> PayloadT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Unexpected {model.__name__}: {e.error_count()} error(s)")
            raise exceptions.backend_unavailable("Unexpected backend response")
