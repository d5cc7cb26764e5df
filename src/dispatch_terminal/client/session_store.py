"""Terminal-local persisted state: theme flag and the guest session."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path.home() / ".dispatch_terminal" / "state.json"


class StoredSession(BaseModel):
    """Guest session as saved on this device."""

    authenticated: bool = True
    label: str
    tenant_id: str
    login_time: int


class LocalState(BaseModel):
    dark_mode: bool = True
    guest_session: StoredSession | None = None
    access_token: str | None = None


class SessionStore:
    """Reads and writes ``LocalState`` as JSON.

    A missing or unreadable file yields the defaults, so dark mode is on
    until the operator turns it off.
    """

    def __init__(self, path: Path | str = DEFAULT_STATE_PATH) -> None:
        self.path = Path(path)

    def load(self) -> LocalState:
        if not self.path.exists():
            return LocalState()
        try:
            return LocalState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable terminal state at %s: %s", self.path, exc)
            return LocalState()

    def save(self, state: LocalState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(indent=2), encoding="utf-8")

    def remember_login(self, login: dict[str, Any]) -> LocalState:
        """Persist the token and session from a PIN login response."""
        state = self.load()
        session = login.get("session")
        state.access_token = login.get("access_token")
        state.guest_session = StoredSession.model_validate(session) if session else None
        self.save(state)
        return state

    def set_dark_mode(self, enabled: bool) -> LocalState:
        state = self.load()
        state.dark_mode = enabled
        self.save(state)
        return state

    def clear_session(self) -> LocalState:
        """Forget the session and token; the theme flag survives."""
        state = self.load()
        state.guest_session = None
        state.access_token = None
        self.save(state)
        return state
