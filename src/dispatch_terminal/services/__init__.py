# src/dispatch_terminal/services/__init__.py
"""Business logic services for the Dispatch Terminal."""

from .drivers import DriverService
from .exits import ExitService
from .operators import OperatorService
from .purge import PurgeGuard
from .queues import QueueService

__all__ = [
    "DriverService",
    "ExitService",
    "OperatorService",
    "PurgeGuard",
    "QueueService",
]
