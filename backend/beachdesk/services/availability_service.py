"""Unit availability and booking conflict detection.

Occupancy is evaluated one calendar day at a time: a day is taken when any
non-cancelled rental of the same unit has ``start_date <= day <= end_date``.
Both the check-in and the check-out day count as occupied.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import ResourceCatalog
from beachdesk.models import Rental, ResourceType
from beachdesk.services import period_service, reservation_service


@dataclass(slots=True)
class AvailabilitySummary:
    resource_type: ResourceType
    day: date
    total: int
    available: int
    occupied: int


def _first_conflict(
    rentals: Sequence[Rental],
    start_date: date,
    end_date: date,
    exclude_rental_id: uuid.UUID | None,
) -> tuple[date, Rental] | None:
    candidates = [r for r in rentals if r.id != exclude_rental_id]
    for day in period_service.iter_days(start_date, end_date):
        for rental in candidates:
            if rental.covers(day):
                return day, rental
    return None


async def find_conflict(
    session: AsyncSession,
    *,
    resource_type: ResourceType,
    unit_number: int,
    start_date: date,
    end_date: date,
    exclude_rental_id: uuid.UUID | None = None,
) -> tuple[date, Rental] | None:
    """First occupied day in the range together with the rental holding it."""
    rentals = await reservation_service.list_for_unit(
        session, resource_type=resource_type, unit_number=unit_number
    )
    return _first_conflict(rentals, start_date, end_date, exclude_rental_id)


async def is_available(
    session: AsyncSession,
    *,
    resource_type: ResourceType,
    unit_number: int,
    start_date: date,
    end_date: date,
    exclude_rental_id: uuid.UUID | None = None,
) -> bool:
    conflict = await find_conflict(
        session,
        resource_type=resource_type,
        unit_number=unit_number,
        start_date=start_date,
        end_date=end_date,
        exclude_rental_id=exclude_rental_id,
    )
    return conflict is None


async def find_first_available_unit(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType,
    start_date: date,
    end_date: date,
) -> int | None:
    """Lowest unit number free for the whole range, or ``None``."""
    spec = catalog.get(resource_type)
    if spec is None or spec.capacity_based:
        return None
    overlapping = await reservation_service.list_by_date_range(
        session, start_date=start_date, end_date=end_date, include_cancelled=False
    )
    by_unit: dict[int, list[Rental]] = {}
    for rental in overlapping:
        if rental.resource_type is spec.type:
            by_unit.setdefault(rental.unit_number, []).append(rental)
    for unit_number in range(1, spec.total + 1):
        if _first_conflict(by_unit.get(unit_number, []), start_date, end_date, None) is None:
            return unit_number
    return None


async def unit_rental_on(
    session: AsyncSession,
    *,
    resource_type: ResourceType,
    unit_number: int,
    day: date,
) -> Rental | None:
    rentals = await reservation_service.list_for_unit(
        session, resource_type=resource_type, unit_number=unit_number
    )
    for rental in rentals:
        if rental.covers(day):
            return rental
    return None


async def available_units(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType,
    day: date,
) -> list[int]:
    spec = catalog.get(resource_type)
    if spec is None or spec.capacity_based:
        return []
    rentals = await reservation_service.list_by_date_range(
        session, start_date=day, end_date=day, include_cancelled=False
    )
    taken = {r.unit_number for r in rentals if r.resource_type is spec.type}
    return [n for n in range(1, spec.total + 1) if n not in taken]


async def availability_summary(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType,
    day: date,
) -> AvailabilitySummary:
    spec = catalog.get(resource_type)
    total = spec.total if spec is not None and not spec.capacity_based else 0
    free = await available_units(
        session, catalog=catalog, resource_type=resource_type, day=day
    )
    return AvailabilitySummary(
        resource_type=ResourceType(resource_type),
        day=day,
        total=total,
        available=len(free),
        occupied=total - len(free),
    )
