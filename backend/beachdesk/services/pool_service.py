"""Pool day and stay passes counted against daily head-count capacity."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import PoolSettings, ResourceCatalog
from beachdesk.core.errors import NotFound, ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import (
    PaymentMethod,
    PoolEntry,
    PoolEntryType,
    PoolPaymentStatus,
    ResourceType,
)
from beachdesk.services import client_service, period_service

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(slots=True)
class PoolQuote:
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


@dataclass(slots=True)
class PoolOccupancy:
    day: date
    people: int
    capacity: int
    percentage: int
    available: int
    entries: list[PoolEntry] = field(default_factory=list)


@dataclass(slots=True)
class PoolRevenue:
    day: date
    total_revenue: Decimal
    paid_revenue: Decimal
    pending_revenue: Decimal
    entries_count: int
    paid_entries_count: int
    people_count: int


@dataclass(slots=True)
class PoolRangeStats:
    start_date: date
    end_date: date
    days: int
    total_revenue: Decimal
    total_people: int
    total_entries: int
    average_revenue_per_day: Decimal
    average_people_per_day: int


def _round(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def group_discount_for(head_count: int, settings: PoolSettings) -> Decimal:
    """Group discount fraction; groups above the largest bracket use that bracket."""
    if not settings.group_discounts or head_count <= 0:
        return ZERO
    largest = max(settings.group_discounts)
    bracket = min(head_count, largest)
    return Decimal(settings.group_discounts.get(bracket, ZERO))


def quote_entry(
    *,
    settings: PoolSettings,
    adults: int,
    children: int,
    entry_type: PoolEntryType,
    days: int = 1,
) -> PoolQuote:
    if entry_type is PoolEntryType.DAY:
        adult_price, child_price, days = settings.adult_day_pass, settings.child_day_pass, 1
    else:
        adult_price, child_price = settings.adult_stay_per_day, settings.child_stay_per_day
    subtotal = (adult_price * adults + child_price * children) * days
    rate = group_discount_for(adults + children, settings)
    discount = subtotal * rate
    return PoolQuote(
        entry_type=entry_type,
        adults=adults,
        children=children,
        days=days,
        adult_price=adult_price,
        child_price=child_price,
        subtotal=_round(subtotal),
        group_discount=rate,
        discount_amount=_round(discount),
        total_price=_round(subtotal - discount),
    )


def _payment_status(amount_paid: Decimal, total: Decimal) -> PoolPaymentStatus:
    if amount_paid <= 0:
        return PoolPaymentStatus.PENDING
    if amount_paid < total:
        return PoolPaymentStatus.PARTIAL
    return PoolPaymentStatus.PAID


def _capacity(catalog: ResourceCatalog) -> int:
    spec = catalog.get(ResourceType.POOL)
    return spec.total if spec is not None else 0


async def list_entries(
    session: AsyncSession, *, include_cancelled: bool = True
) -> Sequence[PoolEntry]:
    stmt = select(PoolEntry).order_by(PoolEntry.created_at)
    if not include_cancelled:
        stmt = stmt.where(PoolEntry.payment_status != PoolPaymentStatus.CANCELLED)
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_entry(session: AsyncSession, *, entry_id: uuid.UUID) -> PoolEntry | None:
    return await session.get(PoolEntry, entry_id)


def _occupancy(entries: Sequence[PoolEntry], day: date, capacity: int) -> PoolOccupancy:
    iso = day.isoformat()
    covering = [e for e in entries if iso in (e.dates or [])]
    people = sum(e.head_count for e in covering)
    return PoolOccupancy(
        day=day,
        people=people,
        capacity=capacity,
        percentage=(
            int(_round(Decimal(people) * 100 / capacity)) if capacity else 0
        ),
        available=capacity - people,
        entries=covering,
    )


async def occupancy_by_date(
    session: AsyncSession, *, catalog: ResourceCatalog, day: date
) -> PoolOccupancy:
    entries = await list_entries(session, include_cancelled=False)
    return _occupancy(entries, day, _capacity(catalog))


async def create_entry(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    settings: PoolSettings,
    entry_type: PoolEntryType | str,
    client_name: str,
    dates: Sequence[date],
    adults: int = 0,
    children: int = 0,
    client_id: uuid.UUID | None = None,
    client_national_id: str | None = None,
    client_phone: str | None = None,
    amount_paid: Decimal | int | str = 0,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
    linked_rental_id: uuid.UUID | None = None,
    notes: str | None = None,
) -> PoolEntry:
    errors: list[str] = []
    try:
        kind = PoolEntryType(entry_type)
    except ValueError:
        raise ValidationError(f"Invalid pool entry type: {entry_type}") from None
    name = (client_name or "").strip()
    if not name:
        errors.append("Client name is required")
    if adults < 0 or children < 0:
        errors.append("Head counts cannot be negative")
    head_count = adults + children
    if head_count <= 0:
        errors.append("At least one person is required")

    days = sorted(set(dates))
    if not days:
        errors.append("At least one date is required")
    elif kind is PoolEntryType.DAY and len(days) != 1:
        errors.append("A day pass covers exactly one date")
    for day in days:
        if not catalog.season.contains(day):
            errors.append(f"{day.isoformat()} is outside the season")

    capacity = _capacity(catalog)
    if capacity <= 0:
        errors.append("The pool is not configured")
    elif head_count > 0:
        entries = await list_entries(session, include_cancelled=False)
        for day in days:
            occupancy = _occupancy(entries, day, capacity)
            if occupancy.people + head_count > capacity:
                errors.append(
                    f"{day.isoformat()}: not enough capacity for {head_count} people. "
                    f"Available: {occupancy.available}"
                )
    paid = Decimal(str(amount_paid or 0))
    if paid < 0:
        errors.append("Amount paid cannot be negative")
    if errors:
        logger.warning("Pool entry rejected: %s", errors)
        raise ValidationError(errors)

    quote = quote_entry(
        settings=settings,
        adults=adults,
        children=children,
        entry_type=kind,
        days=len(days),
    )
    if paid > quote.total_price:
        raise ValidationError("Amount paid cannot exceed the entry total")

    entry = PoolEntry(
        entry_type=kind,
        client_id=client_id,
        client_name=name,
        client_national_id=client_service.digits_only(client_national_id),
        client_phone=client_service.digits_only(client_phone),
        adults=adults,
        children=children,
        dates=[day.isoformat() for day in days],
        adult_price=quote.adult_price,
        child_price=quote.child_price,
        subtotal=quote.subtotal,
        group_discount=quote.group_discount,
        discount_amount=quote.discount_amount,
        total_price=quote.total_price,
        amount_paid=paid,
        payment_status=_payment_status(paid, quote.total_price),
        payment_method=PaymentMethod(payment_method),
        linked_rental_id=linked_rental_id,
        notes=(notes or "").strip(),
    )
    session.add(entry)
    await commit_or_raise(session)
    await session.refresh(entry)
    logger.info("Pool entry %s created for %d people", entry.id, head_count)
    return entry


async def cancel_entry(session: AsyncSession, *, entry_id: uuid.UUID) -> PoolEntry:
    entry = await session.get(PoolEntry, entry_id)
    if entry is None:
        raise NotFound("Pool entry", entry_id)
    entry.payment_status = PoolPaymentStatus.CANCELLED
    await commit_or_raise(session)
    await session.refresh(entry)
    logger.info("Pool entry %s cancelled", entry_id)
    return entry


async def delete_entry(session: AsyncSession, *, entry_id: uuid.UUID) -> bool:
    entry = await session.get(PoolEntry, entry_id)
    if entry is None:
        return False
    await session.delete(entry)
    await commit_or_raise(session)
    return True


def _revenue(entries: Sequence[PoolEntry], day: date, capacity: int) -> PoolRevenue:
    total = paid = pending = ZERO
    count = paid_count = 0
    for entry in entries:
        if entry.created_at.date() != day:
            continue
        count += 1
        entry_total = Decimal(entry.total_price)
        entry_paid = Decimal(entry.amount_paid)
        total += entry_total
        if entry.payment_status is PoolPaymentStatus.PAID:
            paid += entry_paid
            paid_count += 1
        elif entry.payment_status is PoolPaymentStatus.PARTIAL:
            paid += entry_paid
            pending += entry_total - entry_paid
        else:
            pending += entry_total
    return PoolRevenue(
        day=day,
        total_revenue=_round(total),
        paid_revenue=_round(paid),
        pending_revenue=_round(pending),
        entries_count=count,
        paid_entries_count=paid_count,
        people_count=_occupancy(entries, day, capacity).people,
    )


async def revenue_by_date(
    session: AsyncSession, *, catalog: ResourceCatalog, day: date
) -> PoolRevenue:
    """Revenue of entries registered on ``day`` plus that day's head count."""
    entries = await list_entries(session, include_cancelled=False)
    return _revenue(entries, day, _capacity(catalog))


async def stats_by_range(
    session: AsyncSession, *, catalog: ResourceCatalog, start_date: date, end_date: date
) -> PoolRangeStats:
    if start_date > end_date:
        raise ValidationError("Start date must be on or before end date")
    entries = await list_entries(session, include_cancelled=False)
    capacity = _capacity(catalog)
    revenue = ZERO
    people = 0
    count = 0
    days = list(period_service.iter_days(start_date, end_date))
    for day in days:
        daily = _revenue(entries, day, capacity)
        revenue += daily.paid_revenue
        people += daily.people_count
        count += daily.entries_count
    return PoolRangeStats(
        start_date=start_date,
        end_date=end_date,
        days=len(days),
        total_revenue=revenue,
        total_people=people,
        total_entries=count,
        average_revenue_per_day=_round(revenue / len(days)),
        average_people_per_day=int(_round(Decimal(people) / len(days))),
    )

