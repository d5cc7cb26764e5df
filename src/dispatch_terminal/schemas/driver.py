# src/dispatch_terminal/schemas/driver.py
"""Driver-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DriverCreate(BaseModel):
    """Schema for registering a driver."""

    name: str = Field(..., min_length=1, max_length=200, description="Driver full name")
    fleet_number: str = Field("", max_length=50, description="Fleet (vehicle) number")
    registration: str = Field("", max_length=50, description="Registration code")
    company: str = Field("", max_length=100, description="Contracting company")

    @field_validator("name", "fleet_number", "registration", "company")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        if not value:
            raise ValueError("Name must not be blank")
        return value


class DriverUpdate(DriverCreate):
    """Schema for editing a driver; every field is replaced."""


class DriverResponse(BaseModel):
    """Schema for driver information returned by the API."""

    id: str
    name: str
    fleet_number: str
    registration: str
    company: str
    tenant_id: str | None = None

    model_config = ConfigDict(from_attributes=True)
