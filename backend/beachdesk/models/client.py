"""Client profile models."""

from __future__ import annotations

import enum
import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, Enum, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from beachdesk.db.base import Base
from beachdesk.models.mixins import TimestampMixin

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")


class ClientClassification(str, enum.Enum):
    """Client tiers driving discount eligibility."""

    REGULAR = "regular"
    FREQUENT = "frequent"
    VIP = "vip"
    BLACKLIST = "blacklist"


class Client(TimestampMixin, Base):
    """A beach guest with cumulative booking statistics."""

    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    phone: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    origin: Mapped[dict[str, Any]] = mapped_column(
        JSONB_TYPE, default=dict, nullable=False
    )
    classification: Mapped[ClientClassification] = mapped_column(
        Enum(ClientClassification),
        default=ClientClassification.REGULAR,
        nullable=False,
        index=True,
    )
    total_reservations: Mapped[int] = mapped_column(
        Integer(), default=0, nullable=False
    )
    total_spent: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), default=Decimal("0"), nullable=False
    )
    first_visit: Mapped[date | None] = mapped_column(Date())
    last_visit: Mapped[date | None] = mapped_column(Date())
    notes: Mapped[str] = mapped_column(Text(), default="", nullable=False)
    blacklist_reason: Mapped[str] = mapped_column(
        String(1024), default="", nullable=False
    )

    @property
    def is_blacklisted(self) -> bool:
        return self.classification is ClientClassification.BLACKLIST
