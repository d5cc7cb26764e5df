"""SQLAlchemy model for PIN-based tenant access."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dispatch_terminal.db.session import Base

from .driver import new_id


class OperatorAccess(Base):
    """A PIN that opens one tenant's workspace."""

    __tablename__ = "operator_access"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    pin: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    label: Mapped[str | None] = mapped_column(Text, nullable=True)
    tenant_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
