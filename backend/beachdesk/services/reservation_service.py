"""Rental record storage."""
from __future__ import annotations

import logging
import unicodedata
import uuid
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy import and_, not_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import ResourceCatalog
from beachdesk.core.errors import NotFound, ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import Rental, RentalStatus, ResourceType
from beachdesk.services import payment_service

logger = logging.getLogger(__name__)

# Columns a wholesale update may replace.
_REPLACEABLE_FIELDS = (
    "resource_type",
    "unit_number",
    "start_date",
    "end_date",
    "client_id",
    "client_name",
    "client_phone",
    "client_national_id",
    "price_per_day",
    "base_price",
    "discount",
    "discount_percentage",
    "total_price",
    "payment_method",
    "status",
    "notes",
)


def _base_query():
    return select(Rental).order_by(Rental.start_date, Rental.resource_type, Rental.unit_number)


async def create_rental_record(session: AsyncSession, *, rental: Rental) -> Rental:
    session.add(rental)
    await commit_or_raise(session)
    await session.refresh(rental)
    return rental


async def get_rental(session: AsyncSession, *, rental_id: uuid.UUID) -> Rental | None:
    return await session.get(Rental, rental_id)


async def update_rental_record(
    session: AsyncSession, *, rental_id: uuid.UUID, rental: Rental
) -> Rental:
    """Replace the stored record with ``rental``'s fields."""
    existing = await session.get(Rental, rental_id)
    if existing is None:
        raise NotFound("Rental", rental_id)
    if existing is not rental:
        for name in _REPLACEABLE_FIELDS:
            setattr(existing, name, getattr(rental, name))
    await commit_or_raise(session)
    await session.refresh(existing)
    return existing


async def delete_rental(session: AsyncSession, *, rental_id: uuid.UUID) -> bool:
    """Hard-delete a rental. Returns ``False`` when nothing was removed."""
    rental = await session.get(Rental, rental_id)
    if rental is None:
        return False
    await session.delete(rental)
    await commit_or_raise(session)
    logger.info("Rental %s deleted", rental_id)
    return True


async def list_rentals(
    session: AsyncSession, *, include_cancelled: bool = True
) -> Sequence[Rental]:
    stmt = _base_query()
    if not include_cancelled:
        stmt = stmt.where(Rental.status != RentalStatus.CANCELLED)
    result = await session.execute(stmt)
    return result.scalars().all()


async def list_by_date_range(
    session: AsyncSession,
    *,
    start_date: date,
    end_date: date,
    include_cancelled: bool = True,
) -> Sequence[Rental]:
    """Rentals overlapping the inclusive range."""
    stmt = _base_query().where(
        not_(or_(Rental.end_date < start_date, Rental.start_date > end_date))
    )
    if not include_cancelled:
        stmt = stmt.where(Rental.status != RentalStatus.CANCELLED)
    result = await session.execute(stmt)
    return result.scalars().all()


async def list_for_unit(
    session: AsyncSession,
    *,
    resource_type: ResourceType,
    unit_number: int,
    include_cancelled: bool = False,
) -> Sequence[Rental]:
    stmt = _base_query().where(
        and_(Rental.resource_type == resource_type, Rental.unit_number == unit_number)
    )
    if not include_cancelled:
        stmt = stmt.where(Rental.status != RentalStatus.CANCELLED)
    result = await session.execute(stmt)
    return result.scalars().all()


async def list_by_client(
    session: AsyncSession, *, client_id: uuid.UUID, include_cancelled: bool = True
) -> Sequence[Rental]:
    stmt = _base_query().where(Rental.client_id == client_id)
    if not include_cancelled:
        stmt = stmt.where(Rental.status != RentalStatus.CANCELLED)
    result = await session.execute(stmt)
    return result.scalars().all()


SEARCH_MIN_CHARS = 2
SEARCH_MAX_RESULTS = 15


def _normalize(value: object) -> str:
    text = unicodedata.normalize("NFD", str(value or "")).lower()
    return "".join(ch for ch in text if not unicodedata.combining(ch)).strip()


def _unit_terms(rental: Rental, catalog: ResourceCatalog) -> tuple[str, ...]:
    spec = catalog.get(rental.resource_type)
    prefix = spec.prefix.lower() if spec else ""
    label = _normalize(spec.label) if spec else ""
    number = str(rental.unit_number)
    return (number, rental.resource_type.value, label, prefix, f"{prefix}{number}")


def _matches(rental: Rental, catalog: ResourceCatalog, term: str) -> bool:
    client_fields = (
        _normalize(rental.client_name),
        rental.client_national_id or "",
        _normalize(rental.client_phone),
    )
    if any(term in value for value in client_fields):
        return True
    if any(value and term in value for value in _unit_terms(rental, catalog)):
        return True
    return term in str(rental.id).lower()


def _relevance(rental: Rental, catalog: ResourceCatalog, term: str, today: date) -> int:
    score = 0
    name = _normalize(rental.client_name)
    if name == term:
        score += 10
    elif name.startswith(term):
        score += 7
    elif term in name:
        score += 5
    national_id = rental.client_national_id or ""
    if national_id == term:
        score += 10
    elif national_id.startswith(term):
        score += 8
    if _unit_terms(rental, catalog)[-1] == term:
        score += 8
    if term in _normalize(rental.client_phone):
        score += 6
    if rental.end_date >= today:
        score += 2
    return score


def _payment_state(paid: Decimal, total: Decimal) -> str:
    if paid >= total:
        return "paid"
    if paid > 0:
        return "partial"
    return "pending"


async def search_rentals(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    query: str,
    payment_status: str | None = None,
    resource_type: ResourceType | str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    status: str | None = None,
    include_cancelled: bool = False,
    today: date | None = None,
    limit: int = SEARCH_MAX_RESULTS,
) -> list[Rental]:
    """Free-text rental lookup ranked by relevance.

    ``query`` matches client name, national id and phone, the unit number,
    type, label or prefixed reference (``S12``) and the rental id. Queries
    shorter than two characters return nothing. ``status`` is ``active``
    (ends today or later) or ``finished``; ``payment_status`` is ``paid``,
    ``partial`` or ``pending``.
    """
    term = _normalize(query)
    if len(term) < SEARCH_MIN_CHARS:
        return []
    if payment_status not in (None, "", "paid", "partial", "pending"):
        raise ValidationError(f"Invalid payment status filter: {payment_status}")
    if status not in (None, "", "active", "finished"):
        raise ValidationError(f"Invalid status filter: {status}")
    try:
        wanted_type = ResourceType(resource_type) if resource_type else None
    except ValueError:
        raise ValidationError(f"Invalid resource type: {resource_type}") from None
    today = today or date.today()

    rentals = [
        rental
        for rental in await list_rentals(session, include_cancelled=include_cancelled)
        if _matches(rental, catalog, term)
    ]
    if wanted_type is not None:
        rentals = [r for r in rentals if r.resource_type is wanted_type]
    if start_date is not None:
        rentals = [r for r in rentals if r.end_date >= start_date]
    if end_date is not None:
        rentals = [r for r in rentals if r.start_date <= end_date]
    if status == "active":
        rentals = [r for r in rentals if r.end_date >= today]
    elif status == "finished":
        rentals = [r for r in rentals if r.end_date < today]
    if payment_status:
        paid = await payment_service.paid_amounts(
            session, rental_ids=[r.id for r in rentals]
        )
        rentals = [
            r
            for r in rentals
            if _payment_state(paid.get(r.id, Decimal("0")), Decimal(r.total_price))
            == payment_status
        ]

    rentals.sort(key=lambda r: r.start_date, reverse=True)
    rentals.sort(key=lambda r: _relevance(r, catalog, term, today), reverse=True)
    return rentals[:limit]
