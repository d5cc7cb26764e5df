"""Engine, session factory and the per-request session dependency.

SQLite is the default store for a single terminal deployment, so the engine
turns on foreign keys there (queue rows cascade with their driver) and keeps
an in-memory database on one shared connection.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dispatch_terminal.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for drivers, queues, exit logs and operator access."""


# Populate Base.metadata before anything calls create_all.
import dispatch_terminal.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for ``url`` with the SQLite adjustments applied."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, echo=echo)

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    sqlite_engine = create_engine(url, echo=echo, **options)

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)
