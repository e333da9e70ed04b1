"""Create reservations, room assignments, discounts, holds and payments

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-16 09:12:31.118402

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("external_user_id", sa.Integer(), nullable=True),
        sa.Column("total_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "registered_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("overall_status", sa.String(30), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index("ix_reservations_external_user_id", "reservations", ["external_user_id"])

    op.create_table(
        "room_assignments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_id", sa.String(40), nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("computed_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("discount", sa.Numeric(12, 2), nullable=True),
        sa.Column("tax", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["reservation_id"], ["reservations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "room_id", "reservation_id", name="uq_room_assignments_room_reservation"
        ),
    )
    op.create_index("ix_room_assignments_room_id", "room_assignments", ["room_id"])
    op.create_index("ix_room_assignments_reservation_id", "room_assignments", ["reservation_id"])

    op.create_table(
        "discount_applications",
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("discount_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["assignment_id"], ["room_assignments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("assignment_id", "discount_id"),
    )

    op.create_table(
        "holds",
        sa.Column("hold_id", sa.String(64), nullable=False),
        sa.Column("room_id", sa.String(40), nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint("hold_id"),
    )
    op.create_index("ix_holds_room_id", "holds", ["room_id"])
    op.create_index("ix_holds_ends_at", "holds", ["ends_at"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=False),
        sa.Column("hold_id", sa.String(64), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("external_user_id", sa.Integer(), nullable=True),
        sa.Column("payment_method_id", sa.Integer(), nullable=False),
        sa.Column("source_account", sa.BigInteger(), nullable=True),
        sa.Column("destination_account", sa.BigInteger(), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["reservation_id"], ["reservations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("hold_id"),
    )
    op.create_index("ix_payments_reservation_id", "payments", ["reservation_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_payments_reservation_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_holds_ends_at", table_name="holds")
    op.drop_index("ix_holds_room_id", table_name="holds")
    op.drop_table("holds")
    op.drop_table("discount_applications")
    op.drop_index("ix_room_assignments_reservation_id", table_name="room_assignments")
    op.drop_index("ix_room_assignments_room_id", table_name="room_assignments")
    op.drop_table("room_assignments")
    op.drop_index("ix_reservations_external_user_id", table_name="reservations")
    op.drop_index("ix_reservations_user_id", table_name="reservations")
    op.drop_table("reservations")
