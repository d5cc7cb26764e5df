"""SQLAlchemy model for queue rows."""

from __future__ import annotations

from sqlalchemy import BigInteger, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dispatch_terminal.core.periods import Period
from dispatch_terminal.db.session import Base

from .driver import Driver, new_id


class QueueEntry(Base):
    """A driver waiting in one period's queue.

    ``arrival_time`` is only a sort key. It starts as the wall-clock arrival in
    milliseconds and is rewritten on every manual reorder.
    """

    __tablename__ = "queues"
    __table_args__ = (
        UniqueConstraint("driver_id", "period", name="uq_queues_driver_period"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    driver_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("drivers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    period: Mapped[Period] = mapped_column(
        Enum(Period, values_callable=lambda e: [p.value for p in e], native_enum=False),
        nullable=False,
        index=True,
    )
    arrival_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tenant_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    driver: Mapped[Driver | None] = relationship("Driver", lazy="joined")
