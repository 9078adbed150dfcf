"""
==============================================================================
Backend Payload Schemas Module
==============================================================================

Lenient models for the JSON returned by the demo backend.

The backend owns these payloads; the portal only needs enough structure to
render them. Unknown keys are ignored, missing or null values fall back to
empty strings and lists, and numbers are accepted as text. Payloads carrying an "error" key are handled before
parsing and never reach these models.

==============================================================================
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BackendPayload(BaseModel):
    """Base for backend payloads: ignore extras, treat null as missing, numbers as text."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


def _as_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


# =============================================================================
# HEALTH
# =============================================================================

class HealthPayload(BackendPayload):
    """GET /health"""
    status: str = Field(default="unknown")


# =============================================================================
# EMERGENCY
# =============================================================================

class PatientSummary(BackendPayload):
    """Critical patient data released for emergencies."""
    name: str = ""
    blood_type: str = ""
    warning: str = ""
    allergies: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)

    @field_validator("allergies", "conditions", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> List[str]:
        return _as_text_list(v)


class RestrictedNotice(BackendPayload):
    """Privacy notes for data withheld from the emergency view."""
    govt_data: str = ""
    financial_data: str = ""


class EmergencyPayload(BackendPayload):
    """GET /emergency/{identifier}"""
    emergency_data: PatientSummary = Field(default_factory=PatientSummary)
    restricted: RestrictedNotice = Field(default_factory=RestrictedNotice)


# =============================================================================
# FORMS
# =============================================================================

class AutoFilledFields(BackendPayload):
    """Form fields the backend can pre-populate."""
    name: str = ""
    dob: str = ""
    address: str = ""


class FormPayload(BackendPayload):
    """GET /forms/{identifier}/{form_type}"""
    auto_filled: AutoFilledFields = Field(default_factory=AutoFilledFields)
    time_saved: str = ""


# =============================================================================
# VAULT
# =============================================================================

class VaultSection(BackendPayload):
    """One data vault (medical, government or financial)."""
    status: str = ""
    last_accessed: str = ""
    data_includes: List[str] = Field(default_factory=list)

    @field_validator("data_includes", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> List[str]:
        return _as_text_list(v)


class DataVaults(BackendPayload):
    medical: VaultSection = Field(default_factory=VaultSection)
    government: VaultSection = Field(default_factory=VaultSection)
    financial: VaultSection = Field(default_factory=VaultSection)


class VaultPayload(BackendPayload):
    """GET /vault/{identifier}"""
    name: str = ""
    aadhaar: str = ""
    data_vaults: DataVaults = Field(default_factory=DataVaults)
    privacy_note: str = ""

    @field_validator("aadhaar", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> str:
        return str(v)
