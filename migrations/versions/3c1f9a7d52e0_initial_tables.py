"""initial tables

Revision ID: 3c1f9a7d52e0
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d52e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERIOD = sa.Enum("Manhã", "Tarde", name="period", native_enum=False)


def upgrade() -> None:
    """Create drivers, queues, exit_logs and operator_access."""
    op.create_table(
        "drivers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("fleet_number", sa.Text(), nullable=False, server_default=""),
        sa.Column("registration", sa.Text(), nullable=False, server_default=""),
        sa.Column("company", sa.Text(), nullable=False, server_default=""),
        sa.Column("tenant_id", sa.String(length=36), nullable=True),
    )
    op.create_index("ix_drivers_name", "drivers", ["name"])
    op.create_index("ix_drivers_tenant_id", "drivers", ["tenant_id"])

    op.create_table(
        "queues",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "driver_id",
            sa.String(length=36),
            sa.ForeignKey("drivers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("period", PERIOD, nullable=False),
        sa.Column("arrival_time", sa.BigInteger(), nullable=False),
        sa.Column("tenant_id", sa.String(length=36), nullable=True),
        sa.UniqueConstraint("driver_id", "period", name="uq_queues_driver_period"),
    )
    op.create_index("ix_queues_driver_id", "queues", ["driver_id"])
    op.create_index("ix_queues_period", "queues", ["period"])
    op.create_index("ix_queues_tenant_id", "queues", ["tenant_id"])

    op.create_table(
        "exit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("driver_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("fleet_number", sa.Text(), nullable=False, server_default=""),
        sa.Column("registration", sa.Text(), nullable=False, server_default=""),
        sa.Column("company", sa.Text(), nullable=False, server_default=""),
        sa.Column("zone", sa.Text(), nullable=False),
        sa.Column("dt_number", sa.Text(), nullable=False, server_default=""),
        sa.Column("orders_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("period", PERIOD, nullable=False),
        sa.Column("exit_time", sa.BigInteger(), nullable=False),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("tenant_id", sa.String(length=36), nullable=True),
    )
    op.create_index("ix_exit_logs_driver_id", "exit_logs", ["driver_id"])
    op.create_index("ix_exit_logs_exit_time", "exit_logs", ["exit_time"])
    op.create_index("ix_exit_logs_date", "exit_logs", ["date"])
    op.create_index("ix_exit_logs_tenant_id", "exit_logs", ["tenant_id"])

    op.create_table(
        "operator_access",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("pin", sa.Text(), nullable=False, unique=True),
        sa.Column("label", sa.Text(), nullable=True),
        sa.Column("tenant_id", sa.String(length=36), nullable=True),
    )
    op.create_index("ix_operator_access_tenant_id", "operator_access", ["tenant_id"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("operator_access")
    op.drop_table("exit_logs")
    op.drop_table("queues")
    op.drop_table("drivers")
