"""Pydantic schemas for pricing periods and price tables."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PricingPeriodRead(BaseModel):
    id: int
    start_date: date
    end_date: date
    days: int
    special: bool
    label: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PriceTableUpdate(BaseModel):
    """Full replacement table: period id to price per day (``None`` leaves it unset)."""

    prices: dict[int, Decimal | None] = Field(default_factory=dict)


class PriceTableRead(BaseModel):
    resource_type: str
    prices: dict[int, Decimal]


class PriceQuoteRead(BaseModel):
    resource_type: str
    day: date
    price_per_day: Decimal | None = None


class PriceSuggestionRead(BaseModel):
    resource_type: str
    start_date: date
    end_date: date
    suggested_price: Decimal | None = None


class PricingCompletenessRead(BaseModel):
    complete: bool
    missing_periods: list[PricingPeriodRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
