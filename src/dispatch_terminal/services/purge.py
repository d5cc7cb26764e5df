# src/dispatch_terminal/services/purge.py
"""Challenge-confirmed deletion of all operational data."""

from __future__ import annotations

import logging
import math
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from threading import Lock

from sqlalchemy.orm import Session

from dispatch_terminal.core.settings import settings
from dispatch_terminal.models import Driver, ExitLog, QueueEntry
from dispatch_terminal.services.changefeed import (
    EVENT_DELETE,
    TABLE_DRIVERS,
    TABLE_EXIT_LOGS,
    TABLE_QUEUES,
    ChangeFeed,
    get_change_feed,
)
from dispatch_terminal.services.errors import NoChallengeError
from dispatch_terminal.services.tenancy import Principal, scoped

logger = logging.getLogger(__name__)


def random_code() -> str:
    """Return a uniformly random six-digit code in ``[100000, 999999]``."""
    return str(100000 + secrets.randbelow(900000))


@dataclass(frozen=True)
class Challenge:
    code: str
    expires_at: float

    def seconds_left(self, now: float) -> int:
        return max(0, math.ceil(self.expires_at - now))

    def expired(self, now: float) -> bool:
        return self.seconds_left(now) <= 0


class PurgeOutcome(str, Enum):
    CONFIRMED = "confirmed"
    EXPIRED = "expired"
    MISMATCHED = "mismatched"


@dataclass(frozen=True)
class Verdict:
    outcome: PurgeOutcome
    challenge: Challenge | None = None

    @property
    def confirmed(self) -> bool:
        return self.outcome is PurgeOutcome.CONFIRMED


class PurgeGuard:
    """Issues and checks short-lived purge codes, one per session.

    A wrong or late code never deletes anything; it replaces the challenge
    with a fresh one. A correct code consumes it.
    """

    def __init__(
        self,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
        code_factory: Callable[[], str] = random_code,
    ) -> None:
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.purge_challenge_ttl_seconds
        self._clock = clock
        self._code_factory = code_factory
        self._challenges: dict[str, Challenge] = {}
        self._lock = Lock()

    def now(self) -> float:
        """Current time on the clock challenges are judged by."""
        return self._clock()

    def issue(self, key: str) -> Challenge:
        challenge = Challenge(code=self._code_factory(), expires_at=self._clock() + self.ttl_seconds)
        with self._lock:
            self._challenges[key] = challenge
        return challenge

    def current(self, key: str) -> Challenge | None:
        with self._lock:
            return self._challenges.get(key)

    def verify(self, key: str, code: str) -> Verdict:
        """Check ``code`` against the challenge issued for ``key``.

        Raises:
            NoChallengeError: If no challenge was issued for ``key``.
        """
        now = self._clock()
        with self._lock:
            challenge = self._challenges.get(key)
            if challenge is None:
                raise NoChallengeError("Request a purge code first")
            if challenge.expired(now):
                outcome = PurgeOutcome.EXPIRED
            elif code.strip() != challenge.code:
                outcome = PurgeOutcome.MISMATCHED
            else:
                del self._challenges[key]
                return Verdict(PurgeOutcome.CONFIRMED)

        logger.info("Purge code %s for %s; issuing a new one", outcome.value, key)
        return Verdict(outcome, self.issue(key))

    def clear(self) -> None:
        with self._lock:
            self._challenges.clear()


_PURGE_GUARD = PurgeGuard()


def get_purge_guard() -> PurgeGuard:
    """Return the process-wide purge guard."""
    return _PURGE_GUARD


def purge_operational_data(
    db: Session,
    principal: Principal,
    feed: ChangeFeed | None = None,
) -> dict[str, int]:
    """Delete every queue row, exit log and driver visible to ``principal``.

    Operator access rows are kept. Guests purge their own tenant; an
    administrator purges everything.
    """
    feed = feed or get_change_feed()
    try:
        deleted = {
            TABLE_QUEUES: scoped(db.query(QueueEntry), QueueEntry, principal).delete(
                synchronize_session=False
            ),
            TABLE_EXIT_LOGS: scoped(db.query(ExitLog), ExitLog, principal).delete(
                synchronize_session=False
            ),
            TABLE_DRIVERS: scoped(db.query(Driver), Driver, principal).delete(
                synchronize_session=False
            ),
        }
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.expire_all()

    logger.warning(
        "Operational data purged by %s (tenant=%s): %s",
        principal.label or principal.subject,
        principal.tenant_id or "*",
        deleted,
    )
    for table in (TABLE_QUEUES, TABLE_EXIT_LOGS, TABLE_DRIVERS):
        feed.notify(table, EVENT_DELETE, None, principal.tenant_id)
    return deleted
