"""Pydantic schemas for dashboard and availability reports."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from beachdesk.models.rental import ResourceType
from beachdesk.schemas.rental import RentalRead


class AvailabilitySummaryRead(BaseModel):
    resource_type: ResourceType
    day: date
    total: int
    available: int
    occupied: int

    model_config = ConfigDict(from_attributes=True)


class FirstAvailableUnitRead(BaseModel):
    resource_type: ResourceType
    start_date: date
    end_date: date
    unit_number: int | None = None


class OccupancyPointRead(BaseModel):
    day: date
    occupied: int
    total: int
    percentage: int
    by_type: dict[str, dict[str, int]] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class ResourceIncomeRead(BaseModel):
    resource_type: ResourceType
    unit_number: int
    label: str
    rentals: int
    total_income: Decimal
    days: int

    model_config = ConfigDict(from_attributes=True)


class RevenueRead(BaseModel):
    month: Decimal
    season: Decimal


class OccupancyRead(BaseModel):
    today: OccupancyPointRead
    week: int
    month: int


class PendingPaymentsRead(BaseModel):
    pending_total: Decimal
    pending_count: int


class RentalMovementsRead(BaseModel):
    check_ins_today: list[RentalRead] = Field(default_factory=list)
    check_outs_today: list[RentalRead] = Field(default_factory=list)
    upcoming_check_ins: list[RentalRead] = Field(default_factory=list)
    upcoming_check_outs: list[RentalRead] = Field(default_factory=list)


class DashboardRead(BaseModel):
    reference_date: date
    revenue: RevenueRead
    occupancy: OccupancyRead
    payments: PendingPaymentsRead
    rentals: RentalMovementsRead
    top_resources: list[ResourceIncomeRead] = Field(default_factory=list)
    occupancy_window: list[OccupancyPointRead] = Field(default_factory=list)
