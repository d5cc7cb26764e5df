"""Exceptions raised by the service layer.

Endpoints translate these into HTTP responses; services never import FastAPI.
"""


class DispatchError(RuntimeError):
    """Base exception for dispatch terminal service failures."""


class NotFoundError(DispatchError):
    """Raised when a row does not exist or is outside the caller's tenant."""


class ConflictError(DispatchError):
    """Raised when an operation clashes with the current state of the data."""


class QueueEmptyError(ConflictError):
    """Raised when an exit is requested on an empty queue."""


class NoChallengeError(ConflictError):
    """Raised when a purge confirmation arrives without an issued challenge."""
