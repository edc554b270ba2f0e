"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-12 10:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

booking_status = sa.Enum("pending", "approved", "rejected", name="booking_status")
payment_status = sa.Enum("unpaid", "paid", name="payment_status")


def upgrade():
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_user_profiles_email", "user_profiles", ["email"], unique=True)

    op.create_table(
        "cabins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("nightly_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("image_url", sa.String()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("capacity > 0", name="ck_cabins_capacity_positive"),
        sa.CheckConstraint("nightly_fee >= 0", name="ck_cabins_nightly_fee_non_negative"),
    )
    op.create_index("ix_cabins_id", "cabins", ["id"])
    op.create_index("ix_cabins_name", "cabins", ["name"], unique=True)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cabin_id", sa.Integer(), sa.ForeignKey("cabins.id"), nullable=False),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("user_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("number_of_guests", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", booking_status, nullable=False, server_default="pending"),
        sa.Column("payment_status", payment_status, nullable=False, server_default="unpaid"),
        sa.Column("payment_amount", sa.Numeric(10, 2)),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("vipps_transaction_id", sa.String()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("end_date >= start_date", name="ck_bookings_date_order"),
        sa.CheckConstraint("number_of_guests > 0", name="ck_bookings_guests_positive"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_cabin_id", "bookings", ["cabin_id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])


def downgrade():
    op.drop_table("bookings")
    op.drop_table("cabins")
    op.drop_table("user_profiles")
    booking_status.drop(op.get_bind(), checkfirst=True)
    payment_status.drop(op.get_bind(), checkfirst=True)
