"""Client-side data sync for the Dispatch Terminal."""

from .session_store import LocalState, SessionStore
from .sync import DataSync, TerminalClient, TerminalClientError, TerminalState

__all__ = [
    "DataSync",
    "LocalState",
    "SessionStore",
    "TerminalClient",
    "TerminalClientError",
    "TerminalState",
]
