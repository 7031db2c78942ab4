"""Pydantic schemas for rentals."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from beachdesk.models.rental import PaymentMethod, RentalStatus, ResourceType


class RentalCreate(BaseModel):
    """Payload for booking a unit.

    Fields are loosely typed so the booking engine can report every
    business validation message in a single response.
    """

    resource_type: str | None = None
    unit_number: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    client_id: uuid.UUID | None = None
    client_name: str | None = None
    client_phone: str | None = None
    client_national_id: str | None = None
    price_per_day: Decimal | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    amount_paid: Decimal = Field(default=Decimal("0"))
    notes: str | None = None
    include_parking: bool = False
    parking_price_per_day: Decimal | None = None
    parking_payment_method: PaymentMethod | None = None
    parking_amount_paid: Decimal | None = None


class RentalUpdate(BaseModel):
    """Mutable rental fields; dates and unit are changed by moving or rebooking."""

    client_name: str | None = None
    client_phone: str | None = None
    client_national_id: str | None = None
    price_per_day: Decimal | None = None
    payment_method: PaymentMethod | None = None
    notes: str | None = None


class RentalMoveRequest(BaseModel):
    unit_number: int


class RentalRead(BaseModel):
    """Serialized rental representation."""

    id: uuid.UUID
    resource_type: ResourceType
    unit_number: int
    start_date: date
    end_date: date
    days: int
    client_id: uuid.UUID | None = None
    client_name: str
    client_phone: str
    client_national_id: str
    price_per_day: Decimal
    base_price: Decimal
    discount: Decimal
    discount_percentage: Decimal
    total_price: Decimal
    payment_method: PaymentMethod
    status: RentalStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RentalBookingRead(RentalRead):
    """A new booking with the parking spot assigned alongside it."""

    parking: RentalRead | None = None
    parking_error: str | None = None


class UnitStatusRead(BaseModel):
    status: str
    payment_status: str | None = None
    rental_id: uuid.UUID | None = None
    client_id: uuid.UUID | None = None
    client_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    days_remaining: int | None = None
    amount_due: Decimal | None = None
    days_until_check_in: int | None = None
    days_until_next_reservation: int | None = None

    model_config = ConfigDict(from_attributes=True)


class PriceBreakdownRead(BaseModel):
    base_price: Decimal
    discount: Decimal
    discount_percentage: Decimal
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)
