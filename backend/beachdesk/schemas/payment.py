"""Pydantic schemas for rental payments."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from beachdesk.models.rental import PaymentMethod


class PaymentCreate(BaseModel):
    rental_id: uuid.UUID
    amount: Decimal
    method: PaymentMethod = PaymentMethod.CASH
    payment_date: date | None = None
    notes: str = ""


class PaymentRead(BaseModel):
    id: uuid.UUID
    rental_id: uuid.UUID
    amount: Decimal
    method: PaymentMethod
    payment_date: date
    notes: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentSummaryRead(BaseModel):
    rental_id: uuid.UUID
    total_price: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    percentage: int
    fully_paid: bool
    payment_count: int
    payments: list[PaymentRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class MethodStatsRead(BaseModel):
    method: PaymentMethod
    count: int
    total: Decimal

    model_config = ConfigDict(from_attributes=True)
