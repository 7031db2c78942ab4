"""Per-period price table models."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import Enum, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from beachdesk.db.base import Base
from beachdesk.models.mixins import TimestampMixin
from beachdesk.models.rental import ResourceType


class PriceRate(TimestampMixin, Base):
    """Price per day for one resource type during one pricing period."""

    __tablename__ = "price_rates"
    __table_args__ = (
        UniqueConstraint("resource_type", "period_id", name="uq_price_rate_period"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    resource_type: Mapped[ResourceType] = mapped_column(
        Enum(ResourceType), nullable=False
    )
    period_id: Mapped[int] = mapped_column(Integer(), nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
