"""Rental (reservation) models."""
from __future__ import annotations

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from beachdesk.db.base import Base
from beachdesk.models.mixins import TimestampMixin


class ResourceType(str, enum.Enum):
    """Categories of rentable resources."""

    UMBRELLA = "umbrella"
    TENT = "tent"
    PARKING = "parking"
    POOL = "pool"


class RentalStatus(str, enum.Enum):
    """Lifecycle states for rentals."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods."""

    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"
    MERCADOPAGO = "mercadopago"
    OTHER = "other"


class Rental(TimestampMixin, Base):
    """A numbered unit booked for an inclusive date range."""

    __tablename__ = "rentals"
    __table_args__ = (
        Index("ix_rentals_unit", "resource_type", "unit_number"),
        Index("ix_rentals_dates", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    resource_type: Mapped[ResourceType] = mapped_column(
        Enum(ResourceType), nullable=False
    )
    unit_number: Mapped[int] = mapped_column(Integer(), nullable=False)
    start_date: Mapped[date] = mapped_column(Date(), nullable=False)
    end_date: Mapped[date] = mapped_column(Date(), nullable=False)
    # Weak reference: clients may be removed without touching their rentals.
    client_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True, index=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    client_national_id: Mapped[str] = mapped_column(String(16), nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), default=PaymentMethod.CASH, nullable=False
    )
    status: Mapped[RentalStatus] = mapped_column(
        Enum(RentalStatus), default=RentalStatus.ACTIVE, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(String(1024))

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
