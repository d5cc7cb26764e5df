# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-dispatch-terminal")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("ADMIN_ACCESS_KEY", "test-admin-key")

from dispatch_terminal.core.security import ROLE_ADMIN, ROLE_GUEST, create_access_token
from dispatch_terminal.db.session import Base
from dispatch_terminal.db.session import get_db as app_get_session
from dispatch_terminal.main import app as fastapi_app
from dispatch_terminal.models import Driver, OperatorAccess, Period, QueueEntry
from dispatch_terminal.services.changefeed import ChangeEvent, ChangeFeed
from dispatch_terminal.services.purge import get_purge_guard
from dispatch_terminal.services.tenancy import ADMIN, Principal

TEST_DB_URL = "sqlite://"
TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


class RecordingFeed(ChangeFeed):
    """Change feed that remembers every published event."""

    def __init__(self) -> None:
        super().__init__(buffer_size=10)
        self.events: list[ChangeEvent] = []

    def publish(self, event: ChangeEvent) -> int:
        self.events.append(event)
        return super().publish(event)

    def tables(self) -> list[str]:
        return [event.table for event in self.events]


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def reset_purge_guard() -> Iterator[None]:
    get_purge_guard().clear()
    yield
    get_purge_guard().clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def feed() -> RecordingFeed:
    return RecordingFeed()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def guest() -> Principal:
    """Guest principal confined to tenant A."""
    return Principal(subject="operator-a", role=ROLE_GUEST, tenant_id=TENANT_A, label="Terminal A")


@pytest.fixture()
def other_guest() -> Principal:
    return Principal(subject="operator-b", role=ROLE_GUEST, tenant_id=TENANT_B, label="Terminal B")


@pytest.fixture()
def admin() -> Principal:
    return ADMIN


@pytest.fixture()
def operator(db_session: Session) -> OperatorAccess:
    """PIN row that opens tenant A."""
    access = OperatorAccess(pin="1984", label="Terminal Principal", tenant_id=TENANT_A)
    db_session.add(access)
    db_session.commit()
    db_session.refresh(access)
    return access


@pytest.fixture()
def guest_headers(operator: OperatorAccess) -> dict[str, str]:
    token = create_access_token(
        operator.id,
        role=ROLE_GUEST,
        tenant_id=TENANT_A,
        label=operator.label,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_guest_headers() -> dict[str, str]:
    token = create_access_token("operator-b", role=ROLE_GUEST, tenant_id=TENANT_B, label="B")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    token = create_access_token("admin", role=ROLE_ADMIN, label="Administrador")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_driver(db_session: Session) -> Callable[..., Driver]:
    """Return a factory persisting drivers in tenant A unless told otherwise."""

    def _make(
        name: str,
        *,
        fleet_number: str = "",
        registration: str = "",
        company: str = "",
        tenant_id: str | None = TENANT_A,
    ) -> Driver:
        driver = Driver(
            name=name,
            fleet_number=fleet_number,
            registration=registration,
            company=company,
            tenant_id=tenant_id,
        )
        db_session.add(driver)
        db_session.commit()
        db_session.refresh(driver)
        return driver

    return _make


@pytest.fixture()
def enqueue(db_session: Session) -> Callable[..., QueueEntry]:
    """Return a factory placing a driver in a queue with an explicit rank."""

    def _enqueue(driver: Driver, period: Period, arrival_time: int) -> QueueEntry:
        entry = QueueEntry(
            driver_id=driver.id,
            period=period,
            arrival_time=arrival_time,
            tenant_id=driver.tenant_id,
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _enqueue
