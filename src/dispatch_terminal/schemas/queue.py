# src/dispatch_terminal/schemas/queue.py
"""Queue-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dispatch_terminal.core.periods import Period


class QueueAdd(BaseModel):
    """Schema for putting a driver at the tail of a period's queue."""

    driver_id: str = Field(..., min_length=1, description="Driver identifier")


class QueueReorder(BaseModel):
    """Schema for rewriting a queue's order.

    Entries not listed keep their relative order after the listed ones.
    """

    queue_ids: list[str] = Field(..., min_length=1, description="Queue row ids, head first")


class QueueMove(BaseModel):
    """Schema for a drag-and-drop move between two zero-based positions."""

    from_index: int = Field(..., ge=0, description="Current position (0 = head)")
    to_index: int = Field(..., ge=0, description="Target position (0 = head)")


class QueueEntryResponse(BaseModel):
    """A queue row joined with its driver."""

    queue_id: str
    driver_id: str
    name: str
    fleet_number: str
    registration: str
    company: str
    arrival_time: int
    period: Period
    tenant_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_driver(cls, data: object) -> object:
        if isinstance(data, dict):
            return data
        driver = getattr(data, "driver", None)
        return {
            "queue_id": getattr(data, "id", None),
            "driver_id": getattr(data, "driver_id", None),
            "name": getattr(driver, "name", ""),
            "fleet_number": getattr(driver, "fleet_number", ""),
            "registration": getattr(driver, "registration", ""),
            "company": getattr(driver, "company", ""),
            "arrival_time": getattr(data, "arrival_time", None),
            "period": getattr(data, "period", None),
            "tenant_id": getattr(data, "tenant_id", None),
        }

    model_config = ConfigDict(from_attributes=True)


class QueuesResponse(BaseModel):
    """Both daily queues, each ordered head first."""

    morning: list[QueueEntryResponse]
    afternoon: list[QueueEntryResponse]
