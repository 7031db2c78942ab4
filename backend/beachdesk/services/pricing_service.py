"""Per-period price tables and price lookups."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import ResourceCatalog
from beachdesk.core.errors import ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import PriceRate, ResourceType
from beachdesk.services import period_service

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PricingCompleteness:
    complete: bool
    missing_periods: list[period_service.PricingPeriod] = field(default_factory=list)


def _resolve_type(catalog: ResourceCatalog, resource_type: ResourceType | str) -> ResourceType:
    spec = catalog.get(resource_type)
    if spec is None:
        raise ValidationError(f"Unknown resource type: {resource_type}")
    return spec.type


async def get_pricing(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType | str,
) -> dict[int, Decimal]:
    """Return ``{period_id: price_per_day}`` for the configured periods of a type."""
    key = _resolve_type(catalog, resource_type)
    result = await session.execute(
        select(PriceRate.period_id, PriceRate.price_per_day)
        .where(PriceRate.resource_type == key)
        .order_by(PriceRate.period_id)
    )
    return {period_id: Decimal(price) for period_id, price in result.all()}


async def get_all_pricing(
    session: AsyncSession, *, catalog: ResourceCatalog
) -> dict[str, dict[int, Decimal]]:
    tables: dict[str, dict[int, Decimal]] = {
        spec.type.value: {} for spec in catalog.unit_types()
    }
    result = await session.execute(select(PriceRate).order_by(PriceRate.period_id))
    for rate in result.scalars():
        table = tables.get(rate.resource_type.value)
        if table is not None:
            table[rate.period_id] = Decimal(rate.price_per_day)
    return tables


async def set_pricing(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType | str,
    prices: Mapping[int | str, Decimal | int | float | str | None],
) -> bool:
    """Replace the whole price table for a resource type.

    ``None`` values leave the period unconfigured. Unknown period ids and
    negative prices are rejected before anything is written.
    """
    key = _resolve_type(catalog, resource_type)
    periods = period_service.periods_by_id(
        period_service.compute_periods(catalog.season, catalog.special_window)
    )

    errors: list[str] = []
    rows: dict[int, Decimal] = {}
    for raw_id, raw_price in prices.items():
        try:
            period_id = int(raw_id)
        except (TypeError, ValueError):
            errors.append(f"Invalid period id: {raw_id}")
            continue
        if period_id not in periods:
            errors.append(f"Period {period_id} does not exist")
            continue
        if raw_price is None or raw_price == "":
            continue
        try:
            price = Decimal(str(raw_price))
        except (ArithmeticError, ValueError):
            errors.append(f"Invalid price for period {period_id}")
            continue
        if not price.is_finite():
            errors.append(f"Invalid price for period {period_id}")
            continue
        if price < 0:
            errors.append(f"Price for period {period_id} cannot be negative")
            continue
        rows[period_id] = price
    if errors:
        logger.warning("Rejected price table for %s: %s", key.value, errors)
        raise ValidationError(errors)

    await session.execute(delete(PriceRate).where(PriceRate.resource_type == key))
    session.add_all(
        PriceRate(resource_type=key, period_id=period_id, price_per_day=price)
        for period_id, price in sorted(rows.items())
    )
    await commit_or_raise(session)
    logger.info("Price table for %s replaced (%d periods)", key.value, len(rows))
    return True


async def get_price(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType | str,
    day: date,
) -> Decimal | None:
    """Price per day for ``day``; ``None`` when the period has no price set."""
    key = _resolve_type(catalog, resource_type)
    periods = period_service.compute_periods(catalog.season, catalog.special_window)
    period = period_service.find_period(periods, day)
    if period is None:
        return None
    result = await session.execute(
        select(PriceRate.price_per_day).where(
            PriceRate.resource_type == key, PriceRate.period_id == period.id
        )
    )
    price = result.scalar_one_or_none()
    return Decimal(price) if price is not None else None


async def suggest_price_for_range(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType | str,
    start_date: date,
    end_date: date,
) -> Decimal | None:
    """Average configured daily price over the range, rounded to a whole unit."""
    table = await get_pricing(session, catalog=catalog, resource_type=resource_type)
    periods = period_service.compute_periods(catalog.season, catalog.special_window)

    total = Decimal("0")
    priced_days = 0
    for day in period_service.iter_days(start_date, end_date):
        period = period_service.find_period(periods, day)
        if period is None:
            continue
        price = table.get(period.id)
        if price is None:
            continue
        total += price
        priced_days += 1
    if priced_days == 0:
        return None
    return (total / priced_days).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


async def check_complete(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    resource_type: ResourceType | str,
) -> PricingCompleteness:
    table = await get_pricing(session, catalog=catalog, resource_type=resource_type)
    periods = period_service.compute_periods(catalog.season, catalog.special_window)
    missing = [
        period
        for period in periods
        if table.get(period.id) is None or table[period.id] <= 0
    ]
    return PricingCompleteness(complete=not missing, missing_periods=missing)
