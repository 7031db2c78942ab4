"""Pool day and stay pass models."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Enum, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from beachdesk.db.base import Base
from beachdesk.models.mixins import TimestampMixin
from beachdesk.models.rental import PaymentMethod

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")


class PoolEntryType(str, enum.Enum):
    """Kinds of pool passes."""

    DAY = "day"
    STAY = "stay"


class PoolPaymentStatus(str, enum.Enum):
    """Settlement state of a pool entry."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    CANCELLED = "cancelled"


class PoolEntry(TimestampMixin, Base):
    """A group admitted to the pool for one or more days."""

    __tablename__ = "pool_entries"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    entry_type: Mapped[PoolEntryType] = mapped_column(
        Enum(PoolEntryType), nullable=False
    )
    client_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_national_id: Mapped[str] = mapped_column(String(16), default="", nullable=False)
    client_phone: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    adults: Mapped[int] = mapped_column(Integer(), default=0, nullable=False)
    children: Mapped[int] = mapped_column(Integer(), default=0, nullable=False)
    # ISO dates covered by the pass.
    dates: Mapped[list[str]] = mapped_column(JSONB_TYPE, default=list, nullable=False)
    adult_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    child_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    group_discount: Mapped[Decimal] = mapped_column(
        Numeric(5, 4), default=Decimal("0"), nullable=False
    )
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    payment_status: Mapped[PoolPaymentStatus] = mapped_column(
        Enum(PoolPaymentStatus), default=PoolPaymentStatus.PENDING, nullable=False
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), default=PaymentMethod.CASH, nullable=False
    )
    linked_rental_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    notes: Mapped[str] = mapped_column(String(1024), default="", nullable=False)

    @property
    def head_count(self) -> int:
        return self.adults + self.children
