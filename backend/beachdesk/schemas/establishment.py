"""Pydantic schemas for the establishment configuration."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ResourceSpecRead(BaseModel):
    type: str
    total: int
    prefix: str
    label: str
    icon: str
    capacity_based: bool

    model_config = ConfigDict(from_attributes=True)


class EstablishmentRead(BaseModel):
    name: str
    location: str
    season_start: date
    season_end: date
    special_window_start: date | None = None
    special_window_days: int
    special_window_label: str
    resources: list[ResourceSpecRead] = Field(default_factory=list)


class ResourceReconfigure(BaseModel):
    """Replaces resource quantities; existing bookings, payments and prices are wiped."""

    quantities: dict[str, int]
    season_start: date | None = None
    season_end: date | None = None
    special_window_start: date | None = None
    special_window_days: int | None = None
    special_window_label: str | None = None
    name: str | None = None
    location: str | None = None


class ClassificationConfigSchema(BaseModel):
    frequent_min_reservations: int = 5
    frequent_discount: Decimal = Decimal("5")
    vip_min_reservations: int = 10
    vip_min_spending: Decimal = Decimal("300000")
    vip_discount: Decimal = Decimal("10")

    model_config = ConfigDict(from_attributes=True)


class PoolSettingsSchema(BaseModel):
    adult_day_pass: Decimal
    adult_stay_per_day: Decimal
    child_day_pass: Decimal
    child_stay_per_day: Decimal
    age_limit: int = 12
    group_discounts: dict[int, Decimal] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)
