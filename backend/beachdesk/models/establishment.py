"""Establishment configuration record."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from beachdesk.db.base import Base
from beachdesk.models.mixins import TimestampMixin

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")

ESTABLISHMENT_ID = 1


class EstablishmentConfig(TimestampMixin, Base):
    """Single-row configuration: season, resources, thresholds and pool prices."""

    __tablename__ = "establishment_config"

    id: Mapped[int] = mapped_column(Integer(), primary_key=True, default=ESTABLISHMENT_ID)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    season_start: Mapped[date] = mapped_column(Date(), nullable=False)
    season_end: Mapped[date] = mapped_column(Date(), nullable=False)
    special_window_start: Mapped[date | None] = mapped_column(Date())
    special_window_days: Mapped[int] = mapped_column(Integer(), default=4, nullable=False)
    special_window_label: Mapped[str] = mapped_column(
        String(64), default="", nullable=False
    )
    # {"umbrella": 50, "tent": 30, ...}
    resources: Mapped[dict[str, Any]] = mapped_column(
        JSONB_TYPE, default=dict, nullable=False
    )
    frequent_min_reservations: Mapped[int] = mapped_column(
        Integer(), default=5, nullable=False
    )
    frequent_discount: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("5"), nullable=False
    )
    vip_min_reservations: Mapped[int] = mapped_column(
        Integer(), default=10, nullable=False
    )
    vip_min_spending: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), default=Decimal("300000"), nullable=False
    )
    vip_discount: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("10"), nullable=False
    )
    pool_settings: Mapped[dict[str, Any]] = mapped_column(
        JSONB_TYPE, default=dict, nullable=False
    )
