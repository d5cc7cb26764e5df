# src/dispatch_terminal/schemas/exit_log.py
"""Exit log Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dispatch_terminal.core.settings import settings
from dispatch_terminal.core.periods import Period


class ExitCreate(BaseModel):
    """Schema for dispatching the driver at the head of a queue."""

    zone: str = Field(..., min_length=1, description="Delivery zone")
    dt_number: str = Field("", max_length=50, description="Transport document number")
    orders_count: int = Field(1, ge=0, description="Number of orders carried")
    queue_id: str | None = Field(
        None,
        description="Expected head-of-queue row; rejected if someone else is first",
    )

    @field_validator("zone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        zone = value.strip().upper()
        if zone not in {z.upper() for z in settings.zones}:
            raise ValueError(f"Unknown zone: {value}")
        return zone

    @field_validator("dt_number")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class VolumeAdjust(BaseModel):
    """Schema for nudging an exit's order count up or down."""

    delta: int = Field(..., description="Signed change; the result is floored at zero")


class ExitLogResponse(BaseModel):
    """Schema for exit log rows returned by the API."""

    id: str
    driver_id: str
    name: str
    fleet_number: str
    registration: str
    company: str
    zone: str
    dt_number: str
    orders_count: int
    period: Period
    exit_time: int
    date: str
    tenant_id: str | None = None

    model_config = ConfigDict(from_attributes=True)
