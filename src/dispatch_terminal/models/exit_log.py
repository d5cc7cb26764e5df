"""SQLAlchemy model for driver departures."""

from __future__ import annotations

from sqlalchemy import BigInteger, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dispatch_terminal.core.periods import Period
from dispatch_terminal.db.session import Base

from .driver import new_id


class ExitLog(Base):
    """Historical record of one driver's departure.

    Driver identity fields are a snapshot taken at exit time. After creation only
    ``orders_count`` is ever adjusted; otherwise the row is deleted whole.
    """

    __tablename__ = "exit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # No foreign key: the snapshot outlives edits to the driver row.
    driver_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    fleet_number: Mapped[str] = mapped_column(Text, nullable=False, default="")
    registration: Mapped[str] = mapped_column(Text, nullable=False, default="")
    company: Mapped[str] = mapped_column(Text, nullable=False, default="")
    zone: Mapped[str] = mapped_column(Text, nullable=False)
    dt_number: Mapped[str] = mapped_column(Text, nullable=False, default="")
    orders_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    period: Mapped[Period] = mapped_column(
        Enum(Period, values_callable=lambda e: [p.value for p in e], native_enum=False),
        nullable=False,
    )
    exit_time: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    tenant_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
