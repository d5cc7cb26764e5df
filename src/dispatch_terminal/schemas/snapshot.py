# src/dispatch_terminal/schemas/snapshot.py
"""Schema for the terminal's full-state snapshot."""

from pydantic import BaseModel

from .driver import DriverResponse
from .exit_log import ExitLogResponse
from .queue import QueueEntryResponse


class SnapshotResponse(BaseModel):
    """Everything the terminal renders, fetched in one request."""

    morning: list[QueueEntryResponse]
    afternoon: list[QueueEntryResponse]
    drivers: list[DriverResponse]
    recent_exits: list[ExitLogResponse]
    server_time: int
