# src/dispatch_terminal/schemas/tenant.py
"""Tenant (PIN access) Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_pin(value: str) -> str:
    pin = value.strip()
    if not pin:
        raise ValueError("PIN must not be blank")
    return pin


class PinUpdate(BaseModel):
    """Schema for rotating a tenant's PIN."""

    pin: str = Field(..., min_length=1, max_length=64, description="Access PIN")

    @field_validator("pin")
    @classmethod
    def _validate_pin(cls, value: str) -> str:
        return _clean_pin(value)


class TenantCreate(PinUpdate):
    """Schema for provisioning a new tenant behind a PIN."""

    label: str = Field(..., min_length=1, max_length=100, description="Display label")


class TenantResponse(BaseModel):
    """Schema for operator access rows, shown to administrators only."""

    id: str
    pin: str
    label: str | None = None
    tenant_id: str | None = None

    model_config = ConfigDict(from_attributes=True)
