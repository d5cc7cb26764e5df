"""SQLAlchemy model for registered delivery drivers."""

from __future__ import annotations

import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dispatch_terminal.db.session import Base


def new_id() -> str:
    """Return a fresh opaque row identifier."""
    return str(uuid.uuid4())


class Driver(Base):
    """One flat record per driver, keyed by an opaque identifier."""

    __tablename__ = "drivers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    fleet_number: Mapped[str] = mapped_column(Text, nullable=False, default="")
    registration: Mapped[str] = mapped_column(Text, nullable=False, default="")
    company: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tenant_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Driver {self.name} ({self.fleet_number})>"
