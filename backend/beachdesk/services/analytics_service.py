"""Dashboard metrics computed by replaying rentals and payments."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import ResourceCatalog
from beachdesk.models import Rental, ResourceType
from beachdesk.services import payment_service, period_service, reservation_service

ZERO = Decimal("0")


@dataclass(slots=True)
class OccupancyPoint:
    day: date
    occupied: int
    total: int
    percentage: int
    by_type: dict[str, dict[str, int]] = field(default_factory=dict)


@dataclass(slots=True)
class ResourceIncome:
    resource_type: ResourceType
    unit_number: int
    label: str
    rentals: int
    total_income: Decimal
    days: int


def _percent(part: int | Decimal, whole: int | Decimal) -> int:
    if not whole:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _month_bounds(reference_date: date) -> tuple[date, date]:
    first = reference_date.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


class _Snapshot:
    """Active rentals and their paid totals, loaded once per report."""

    def __init__(
        self,
        catalog: ResourceCatalog,
        rentals: Sequence[Rental],
        paid: dict[Any, Decimal],
    ) -> None:
        self.catalog = catalog
        self.rentals = list(rentals)
        self.paid = paid

    def paid_for(self, rental: Rental) -> Decimal:
        return self.paid.get(rental.id, ZERO)

    def pending_for(self, rental: Rental) -> Decimal:
        return Decimal(rental.total_price) - self.paid_for(rental)

    def occupied_on(self, day: date, resource_type: ResourceType | None = None) -> int:
        units: set[tuple[ResourceType, int]] = set()
        for rental in self.rentals:
            if resource_type is not None and rental.resource_type is not resource_type:
                continue
            spec = self.catalog.get(rental.resource_type)
            if spec is None or spec.capacity_based or rental.unit_number > spec.total:
                continue
            if rental.covers(day):
                units.add((rental.resource_type, rental.unit_number))
        return len(units)

    def point(self, day: date) -> OccupancyPoint:
        by_type: dict[str, dict[str, int]] = {}
        for spec in self.catalog.unit_types():
            occupied = self.occupied_on(day, spec.type)
            by_type[spec.type.value] = {
                "occupied": occupied,
                "total": spec.total,
                "percentage": _percent(occupied, spec.total),
            }
        occupied = sum(item["occupied"] for item in by_type.values())
        total = self.catalog.total_units()
        return OccupancyPoint(
            day=day,
            occupied=occupied,
            total=total,
            percentage=_percent(occupied, total),
            by_type=by_type,
        )


async def _snapshot(session: AsyncSession, catalog: ResourceCatalog) -> _Snapshot:
    rentals = await reservation_service.list_rentals(session, include_cancelled=False)
    paid = await payment_service.paid_amounts(session, rental_ids=[r.id for r in rentals])
    return _Snapshot(catalog, rentals, paid)


def _revenue_month(snapshot: _Snapshot, reference_date: date) -> Decimal:
    first, last = _month_bounds(reference_date)
    return sum(
        (
            snapshot.paid_for(r)
            for r in snapshot.rentals
            if r.start_date <= last and r.end_date >= first
        ),
        ZERO,
    )


def _revenue_season(snapshot: _Snapshot) -> Decimal:
    return sum((snapshot.paid_for(r) for r in snapshot.rentals), ZERO)


def _average_percentage(snapshot: _Snapshot, days: Sequence[date]) -> int:
    if not days:
        return 0
    total = sum(Decimal(snapshot.point(day).percentage) for day in days)
    return _percent(total, len(days) * 100)


def _upcoming_check_ins(
    snapshot: _Snapshot, reference_date: date, horizon: int
) -> list[Rental]:
    rentals = [
        r
        for r in snapshot.rentals
        if 0 < (r.start_date - reference_date).days <= horizon
    ]
    return sorted(rentals, key=lambda r: r.start_date)


def _upcoming_check_outs(
    snapshot: _Snapshot, reference_date: date, horizon: int
) -> list[Rental]:
    rentals = [
        r
        for r in snapshot.rentals
        if 0 <= (r.end_date - reference_date).days <= horizon
    ]
    return sorted(rentals, key=lambda r: r.end_date)


def _top_resources(snapshot: _Snapshot, limit: int) -> list[ResourceIncome]:
    stats: dict[tuple[ResourceType, int], ResourceIncome] = {}
    for rental in snapshot.rentals:
        key = (rental.resource_type, rental.unit_number)
        entry = stats.get(key)
        if entry is None:
            spec = snapshot.catalog.get(rental.resource_type)
            entry = ResourceIncome(
                resource_type=rental.resource_type,
                unit_number=rental.unit_number,
                label=(
                    spec.unit_label(rental.unit_number)
                    if spec
                    else f"{rental.resource_type.value}-{rental.unit_number}"
                ),
                rentals=0,
                total_income=ZERO,
                days=0,
            )
            stats[key] = entry
        entry.rentals += 1
        entry.total_income += snapshot.paid_for(rental)
        entry.days += rental.days
    ranked = sorted(stats.values(), key=lambda item: item.total_income, reverse=True)
    return ranked[:limit]


async def revenue_month(
    session: AsyncSession, *, catalog: ResourceCatalog, reference_date: date
) -> Decimal:
    """Paid amounts of rentals overlapping the reference month."""
    return _revenue_month(await _snapshot(session, catalog), reference_date)


async def revenue_season(session: AsyncSession, *, catalog: ResourceCatalog) -> Decimal:
    return _revenue_season(await _snapshot(session, catalog))


async def occupancy_on(
    session: AsyncSession, *, catalog: ResourceCatalog, day: date
) -> OccupancyPoint:
    return (await _snapshot(session, catalog)).point(day)


async def occupancy_week(
    session: AsyncSession, *, catalog: ResourceCatalog, reference_date: date
) -> int:
    """Average occupancy percentage over the seven days ending on the reference date."""
    days = [reference_date - timedelta(days=offset) for offset in range(7)]
    return _average_percentage(await _snapshot(session, catalog), days)


async def occupancy_month_to_date(
    session: AsyncSession, *, catalog: ResourceCatalog, reference_date: date
) -> int:
    first, _ = _month_bounds(reference_date)
    days = list(period_service.iter_days(first, reference_date))
    return _average_percentage(await _snapshot(session, catalog), days)


async def occupancy_window(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    reference_date: date,
    days_before: int = 7,
    days_after: int = 7,
) -> list[OccupancyPoint]:
    snapshot = await _snapshot(session, catalog)
    return [
        snapshot.point(day)
        for day in period_service.iter_days(
            reference_date - timedelta(days=days_before),
            reference_date + timedelta(days=days_after),
        )
    ]


async def pending_totals(
    session: AsyncSession, *, catalog: ResourceCatalog
) -> tuple[Decimal, int]:
    """Outstanding balance across active rentals and how many owe money."""
    snapshot = await _snapshot(session, catalog)
    pending = [snapshot.pending_for(r) for r in snapshot.rentals]
    owing = [amount for amount in pending if amount > 0]
    return sum(owing, ZERO), len(owing)


async def check_ins_on(
    session: AsyncSession, *, catalog: ResourceCatalog, day: date
) -> list[Rental]:
    snapshot = await _snapshot(session, catalog)
    return [r for r in snapshot.rentals if r.start_date == day]


async def check_outs_on(
    session: AsyncSession, *, catalog: ResourceCatalog, day: date
) -> list[Rental]:
    snapshot = await _snapshot(session, catalog)
    return [r for r in snapshot.rentals if r.end_date == day]


async def upcoming_check_ins(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    reference_date: date,
    days: int = 7,
) -> list[Rental]:
    return _upcoming_check_ins(await _snapshot(session, catalog), reference_date, days)


async def upcoming_check_outs(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    reference_date: date,
    days: int = 7,
) -> list[Rental]:
    return _upcoming_check_outs(await _snapshot(session, catalog), reference_date, days)


async def top_resources(
    session: AsyncSession, *, catalog: ResourceCatalog, limit: int = 5
) -> list[ResourceIncome]:
    return _top_resources(await _snapshot(session, catalog), limit)


async def dashboard_metrics(
    session: AsyncSession, *, catalog: ResourceCatalog, reference_date: date
) -> dict[str, Any]:
    """All dashboard figures from a single read of the ledger."""
    snapshot = await _snapshot(session, catalog)
    first, _ = _month_bounds(reference_date)
    pending = [snapshot.pending_for(r) for r in snapshot.rentals]
    owing = [amount for amount in pending if amount > 0]
    return {
        "reference_date": reference_date,
        "revenue": {
            "month": _revenue_month(snapshot, reference_date),
            "season": _revenue_season(snapshot),
        },
        "occupancy": {
            "today": snapshot.point(reference_date),
            "week": _average_percentage(
                snapshot,
                [reference_date - timedelta(days=offset) for offset in range(7)],
            ),
            "month": _average_percentage(
                snapshot, list(period_service.iter_days(first, reference_date))
            ),
        },
        "payments": {"pending_total": sum(owing, ZERO), "pending_count": len(owing)},
        "rentals": {
            "check_ins_today": [
                r for r in snapshot.rentals if r.start_date == reference_date
            ],
            "check_outs_today": [
                r for r in snapshot.rentals if r.end_date == reference_date
            ],
            "upcoming_check_ins": _upcoming_check_ins(snapshot, reference_date, 7),
            "upcoming_check_outs": _upcoming_check_outs(snapshot, reference_date, 7),
        },
        "top_resources": _top_resources(snapshot, 5),
        "occupancy_window": [
            snapshot.point(day)
            for day in period_service.iter_days(
                reference_date - timedelta(days=7), reference_date + timedelta(days=7)
            )
        ],
    }
