"""Pricing period and price table endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import ResourceCatalog
from beachdesk.core.errors import LedgerError
from beachdesk.schemas.pricing import (
    PriceQuoteRead,
    PriceSuggestionRead,
    PriceTableRead,
    PriceTableUpdate,
    PricingCompletenessRead,
    PricingPeriodRead,
)
from beachdesk.services import period_service, pricing_service

router = APIRouter()


@router.get("/periods", response_model=list[PricingPeriodRead], summary="Pricing periods")
async def list_periods(
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> list[PricingPeriodRead]:
    periods = period_service.compute_periods(catalog.season, catalog.special_window)
    return [PricingPeriodRead.model_validate(period) for period in periods]


@router.get("", response_model=list[PriceTableRead], summary="All price tables")
async def list_price_tables(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> list[PriceTableRead]:
    tables = await pricing_service.get_all_pricing(session, catalog=catalog)
    return [
        PriceTableRead(resource_type=resource_type, prices=prices)
        for resource_type, prices in tables.items()
    ]


@router.get("/{resource_type}", response_model=PriceTableRead, summary="Price table")
async def get_price_table(
    resource_type: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> PriceTableRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    prices = await pricing_service.get_pricing(
        session, catalog=catalog, resource_type=spec.type
    )
    return PriceTableRead(resource_type=spec.type.value, prices=prices)


@router.put("/{resource_type}", response_model=PriceTableRead, summary="Replace price table")
async def set_price_table(
    resource_type: str,
    payload: PriceTableUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> PriceTableRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    try:
        await pricing_service.set_pricing(
            session, catalog=catalog, resource_type=spec.type, prices=payload.prices
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    prices = await pricing_service.get_pricing(
        session, catalog=catalog, resource_type=spec.type
    )
    return PriceTableRead(resource_type=spec.type.value, prices=prices)


@router.get("/{resource_type}/price", response_model=PriceQuoteRead, summary="Price for a date")
async def get_price(
    resource_type: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    day: Annotated[date, Query(alias="date")],
) -> PriceQuoteRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    price = await pricing_service.get_price(
        session, catalog=catalog, resource_type=spec.type, day=day
    )
    return PriceQuoteRead(resource_type=spec.type.value, day=day, price_per_day=price)


@router.get(
    "/{resource_type}/suggest",
    response_model=PriceSuggestionRead,
    summary="Suggested price per day for a range",
)
async def suggest_price(
    resource_type: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    start_date: date,
    end_date: date,
) -> PriceSuggestionRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    suggested = await pricing_service.suggest_price_for_range(
        session,
        catalog=catalog,
        resource_type=spec.type,
        start_date=start_date,
        end_date=end_date,
    )
    return PriceSuggestionRead(
        resource_type=spec.type.value,
        start_date=start_date,
        end_date=end_date,
        suggested_price=suggested,
    )


@router.get(
    "/{resource_type}/completeness",
    response_model=PricingCompletenessRead,
    summary="Periods still missing a price",
)
async def check_complete(
    resource_type: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> PricingCompletenessRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    result = await pricing_service.check_complete(
        session, catalog=catalog, resource_type=spec.type
    )
    return PricingCompletenessRead.model_validate(result)
