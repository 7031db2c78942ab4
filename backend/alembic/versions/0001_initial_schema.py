"""Initial ledger schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Enum columns persist member names.
resource_type_enum = postgresql.ENUM(
    "UMBRELLA", "TENT", "PARKING", "POOL", name="resourcetype", create_type=False
)
payment_method_enum = postgresql.ENUM(
    "CASH",
    "TRANSFER",
    "CARD",
    "MERCADOPAGO",
    "OTHER",
    name="paymentmethod",
    create_type=False,
)
rental_status_enum = postgresql.ENUM(
    "ACTIVE", "CANCELLED", name="rentalstatus", create_type=False
)
client_classification_enum = postgresql.ENUM(
    "REGULAR",
    "FREQUENT",
    "VIP",
    "BLACKLIST",
    name="clientclassification",
    create_type=False,
)
pool_entry_type_enum = postgresql.ENUM(
    "DAY", "STAY", name="poolentrytype", create_type=False
)
pool_payment_status_enum = postgresql.ENUM(
    "PENDING",
    "PARTIAL",
    "PAID",
    "CANCELLED",
    name="poolpaymentstatus",
    create_type=False,
)

_ENUMS = (
    resource_type_enum,
    payment_method_enum,
    rental_status_enum,
    client_classification_enum,
    pool_entry_type_enum,
    pool_payment_status_enum,
)

JSON_TYPE = postgresql.JSONB().with_variant(sa.JSON(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_type in _ENUMS:
            enum_type.create(bind, checkfirst=True)

    op.create_table(
        "establishment_config",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("season_start", sa.Date(), nullable=False),
        sa.Column("season_end", sa.Date(), nullable=False),
        sa.Column("special_window_start", sa.Date()),
        sa.Column("special_window_days", sa.Integer(), nullable=False, server_default="4"),
        sa.Column(
            "special_window_label", sa.String(length=64), nullable=False, server_default=""
        ),
        sa.Column("resources", JSON_TYPE, nullable=False),
        sa.Column(
            "frequent_min_reservations", sa.Integer(), nullable=False, server_default="5"
        ),
        sa.Column(
            "frequent_discount", sa.Numeric(5, 2), nullable=False, server_default="5"
        ),
        sa.Column("vip_min_reservations", sa.Integer(), nullable=False, server_default="10"),
        sa.Column(
            "vip_min_spending", sa.Numeric(14, 2), nullable=False, server_default="300000"
        ),
        sa.Column("vip_discount", sa.Numeric(5, 2), nullable=False, server_default="10"),
        sa.Column("pool_settings", JSON_TYPE, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("national_id", sa.String(length=16), nullable=False, unique=True),
        sa.Column("phone", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("origin", JSON_TYPE, nullable=False),
        sa.Column(
            "classification",
            client_classification_enum,
            nullable=False,
            server_default="REGULAR",
        ),
        sa.Column("total_reservations", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("first_visit", sa.Date()),
        sa.Column("last_visit", sa.Date()),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "blacklist_reason", sa.String(length=1024), nullable=False, server_default=""
        ),
        *_timestamps(),
    )
    op.create_index("ix_clients_classification", "clients", ["classification"])

    op.create_table(
        "rentals",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("resource_type", resource_type_enum, nullable=False),
        sa.Column("unit_number", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("client_id", sa.Uuid(as_uuid=True)),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("client_phone", sa.String(length=32), nullable=False),
        sa.Column("client_national_id", sa.String(length=16), nullable=False),
        sa.Column("price_per_day", sa.Numeric(12, 2), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column(
            "discount_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"
        ),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "payment_method", payment_method_enum, nullable=False, server_default="CASH"
        ),
        sa.Column("status", rental_status_enum, nullable=False, server_default="ACTIVE"),
        sa.Column("notes", sa.String(length=1024)),
        *_timestamps(),
    )
    op.create_index("ix_rentals_unit", "rentals", ["resource_type", "unit_number"])
    op.create_index("ix_rentals_dates", "rentals", ["start_date", "end_date"])
    op.create_index("ix_rentals_client_id", "rentals", ["client_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("rental_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("method", payment_method_enum, nullable=False, server_default="CASH"),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_payments_rental_id", "payments", ["rental_id"])

    op.create_table(
        "price_rates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("resource_type", resource_type_enum, nullable=False),
        sa.Column("period_id", sa.Integer(), nullable=False),
        sa.Column("price_per_day", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("resource_type", "period_id", name="uq_price_rate_period"),
    )

    op.create_table(
        "pool_entries",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("entry_type", pool_entry_type_enum, nullable=False),
        sa.Column("client_id", sa.Uuid(as_uuid=True)),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column(
            "client_national_id", sa.String(length=16), nullable=False, server_default=""
        ),
        sa.Column("client_phone", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("adults", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("children", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dates", JSON_TYPE, nullable=False),
        sa.Column("adult_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("child_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("group_discount", sa.Numeric(5, 4), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("amount_paid", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column(
            "payment_status",
            pool_payment_status_enum,
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column(
            "payment_method", payment_method_enum, nullable=False, server_default="CASH"
        ),
        sa.Column("linked_rental_id", sa.Uuid(as_uuid=True)),
        sa.Column("notes", sa.String(length=1024), nullable=False, server_default=""),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("pool_entries")
    op.drop_table("price_rates")
    op.drop_index("ix_payments_rental_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_rentals_client_id", table_name="rentals")
    op.drop_index("ix_rentals_dates", table_name="rentals")
    op.drop_index("ix_rentals_unit", table_name="rentals")
    op.drop_table("rentals")
    op.drop_index("ix_clients_classification", table_name="clients")
    op.drop_table("clients")
    op.drop_table("establishment_config")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_type in reversed(_ENUMS):
            enum_type.drop(bind, checkfirst=True)
