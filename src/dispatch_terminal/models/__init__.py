# src/dispatch_terminal/models/__init__.py
"""SQLAlchemy models for the Dispatch Terminal."""

from dispatch_terminal.core.periods import Period

from .driver import Driver
from .exit_log import ExitLog
from .operator_access import OperatorAccess
from .queue import QueueEntry

__all__ = [
    "Driver",
    "ExitLog",
    "OperatorAccess",
    "Period",
    "QueueEntry",
]
