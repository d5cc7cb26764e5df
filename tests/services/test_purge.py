# tests/services/test_purge.py
"""Tests for the purge challenge and the purge itself."""

import pytest

from dispatch_terminal.models import Driver, ExitLog, OperatorAccess, Period, QueueEntry
from dispatch_terminal.services.errors import NoChallengeError
from dispatch_terminal.services.purge import (
    PurgeGuard,
    PurgeOutcome,
    purge_operational_data,
    random_code,
)


class SecondsClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _guard(clock: SecondsClock, *codes: str) -> PurgeGuard:
    pending = list(codes)
    return PurgeGuard(ttl_seconds=30, clock=clock, code_factory=lambda: pending.pop(0))


def test_random_code_is_six_digits() -> None:
    for _ in range(200):
        code = random_code()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


def test_late_code_is_expired_and_reissued() -> None:
    """Code 482193 issued at t=0 and typed at t=31 is expired."""
    clock = SecondsClock()
    guard = _guard(clock, "482193", "555555")
    guard.issue("op")

    clock.now = 31
    verdict = guard.verify("op", "482193")

    assert verdict.outcome is PurgeOutcome.EXPIRED
    assert verdict.challenge is not None
    assert verdict.challenge.code == "555555"
    assert verdict.challenge.expires_at == 61


def test_code_at_exact_expiry_is_rejected() -> None:
    clock = SecondsClock()
    guard = _guard(clock, "482193", "111111")
    guard.issue("op")

    clock.now = 30
    assert guard.verify("op", "482193").outcome is PurgeOutcome.EXPIRED


def test_mismatch_reissues_and_never_confirms() -> None:
    clock = SecondsClock()
    guard = _guard(clock, "482193", "700001", "700002")
    guard.issue("op")

    clock.now = 5
    verdict = guard.verify("op", "482194")
    assert verdict.outcome is PurgeOutcome.MISMATCHED
    assert not verdict.confirmed
    # The old code is dead once replaced.
    assert guard.verify("op", "482193").outcome is not PurgeOutcome.CONFIRMED


def test_matching_code_confirms_once() -> None:
    clock = SecondsClock()
    guard = _guard(clock, "482193")
    guard.issue("op")

    clock.now = 29.5
    assert guard.verify("op", " 482193 ").confirmed
    with pytest.raises(NoChallengeError):
        guard.verify("op", "482193")


def test_challenges_are_per_key() -> None:
    clock = SecondsClock()
    guard = _guard(clock, "100000", "200000", "300000")
    guard.issue("a")
    guard.issue("b")

    assert guard.verify("a", "200000").outcome is PurgeOutcome.MISMATCHED
    assert guard.current("b").code == "200000"


def test_verify_without_challenge() -> None:
    with pytest.raises(NoChallengeError):
        PurgeGuard().verify("nobody", "123456")


def _seed(db_session, tenant_id: str) -> None:
    driver = Driver(name=f"Driver {tenant_id}", tenant_id=tenant_id)
    db_session.add(driver)
    db_session.flush()
    db_session.add(
        QueueEntry(driver_id=driver.id, period=Period.MORNING, arrival_time=1, tenant_id=tenant_id)
    )
    db_session.add(
        ExitLog(
            driver_id=driver.id,
            name=driver.name,
            zone="SUL",
            period=Period.MORNING,
            exit_time=1,
            date="2024-01-01",
            tenant_id=tenant_id,
        )
    )
    db_session.commit()


def test_guest_purge_is_tenant_scoped(db_session, guest, feed, operator) -> None:
    _seed(db_session, "tenant-a")
    _seed(db_session, "tenant-b")

    deleted = purge_operational_data(db_session, guest, feed)

    assert deleted == {"queues": 1, "exit_logs": 1, "drivers": 1}
    assert [d.tenant_id for d in db_session.query(Driver).all()] == ["tenant-b"]
    assert db_session.query(OperatorAccess).count() == 1
    assert sorted(feed.tables()) == ["drivers", "exit_logs", "queues"]


def test_admin_purge_clears_everything(db_session, admin, feed, operator) -> None:
    _seed(db_session, "tenant-a")
    _seed(db_session, "tenant-b")

    deleted = purge_operational_data(db_session, admin, feed)

    assert deleted == {"queues": 2, "exit_logs": 2, "drivers": 2}
    assert db_session.query(QueueEntry).count() == 0
    assert db_session.query(ExitLog).count() == 0
    assert db_session.query(Driver).count() == 0
    assert db_session.query(OperatorAccess).count() == 1
