"""Pydantic schemas for pool passes."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from beachdesk.models.pool import PoolEntryType, PoolPaymentStatus
from beachdesk.models.rental import PaymentMethod


class PoolEntryCreate(BaseModel):
    entry_type: PoolEntryType
    client_name: str
    dates: list[date]
    adults: int = Field(default=0, ge=0)
    children: int = Field(default=0, ge=0)
    client_id: uuid.UUID | None = None
    client_national_id: str | None = None
    client_phone: str | None = None
    amount_paid: Decimal = Decimal("0")
    payment_method: PaymentMethod = PaymentMethod.CASH
    linked_rental_id: uuid.UUID | None = None
    notes: str | None = None


class PoolEntryRead(BaseModel):
    id: uuid.UUID
    entry_type: PoolEntryType
    client_id: uuid.UUID | None = None
    client_name: str
    client_national_id: str
    client_phone: str
    adults: int
    children: int
    dates: list[date]
    adult_price: Decimal
    child_price: Decimal
    subtotal: Decimal
    group_discount: Decimal
    discount_amount: Decimal
    total_price: Decimal
    amount_paid: Decimal
    payment_status: PoolPaymentStatus
    payment_method: PaymentMethod
    linked_rental_id: uuid.UUID | None = None
    notes: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PoolQuoteRead(BaseModel):
    entry_type: PoolEntryType
    adults: int
    children: int
    days: int
    adult_price: Decimal
    child_price: Decimal
    subtotal: Decimal
    group_discount: Decimal
    discount_amount: Decimal
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class PoolOccupancyRead(BaseModel):
    day: date
    people: int
    capacity: int
    percentage: int
    available: int

    model_config = ConfigDict(from_attributes=True)


class PoolRevenueRead(BaseModel):
    day: date
    total_revenue: Decimal
    paid_revenue: Decimal
    pending_revenue: Decimal
    entries_count: int
    paid_entries_count: int
    people_count: int

    model_config = ConfigDict(from_attributes=True)


class PoolRangeStatsRead(BaseModel):
    start_date: date
    end_date: date
    days: int
    total_revenue: Decimal
    total_people: int
    total_entries: int
    average_revenue_per_day: Decimal
    average_people_per_day: int

    model_config = ConfigDict(from_attributes=True)
