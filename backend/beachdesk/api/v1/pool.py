"""Pool pass endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import PoolSettings, ResourceCatalog
from beachdesk.core.errors import LedgerError
from beachdesk.models.pool import PoolEntryType
from beachdesk.schemas.pool import (
    PoolEntryCreate,
    PoolEntryRead,
    PoolOccupancyRead,
    PoolQuoteRead,
    PoolRangeStatsRead,
    PoolRevenueRead,
)
from beachdesk.services import pool_service

router = APIRouter()


@router.get("/quote", response_model=PoolQuoteRead, summary="Price a pool pass")
async def quote(
    pool_settings: Annotated[PoolSettings, Depends(deps.get_pool_settings)],
    entry_type: PoolEntryType,
    adults: Annotated[int, Query(ge=0)] = 1,
    children: Annotated[int, Query(ge=0)] = 0,
    days: Annotated[int, Query(ge=1)] = 1,
) -> PoolQuoteRead:
    result = pool_service.quote_entry(
        settings=pool_settings,
        adults=adults,
        children=children,
        entry_type=entry_type,
        days=days,
    )
    return PoolQuoteRead.model_validate(result)


@router.get("/entries", response_model=list[PoolEntryRead], summary="List pool entries")
async def list_entries(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    include_cancelled: bool = True,
) -> list[PoolEntryRead]:
    entries = await pool_service.list_entries(session, include_cancelled=include_cancelled)
    return [PoolEntryRead.model_validate(entry) for entry in entries]


@router.post(
    "/entries",
    response_model=PoolEntryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Sell a pool pass",
)
async def create_entry(
    payload: PoolEntryCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    pool_settings: Annotated[PoolSettings, Depends(deps.get_pool_settings)],
) -> PoolEntryRead:
    try:
        entry = await pool_service.create_entry(
            session, catalog=catalog, settings=pool_settings, **payload.model_dump()
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return PoolEntryRead.model_validate(entry)


@router.post(
    "/entries/{entry_id}/cancel",
    response_model=PoolEntryRead,
    summary="Cancel a pool pass",
)
async def cancel_entry(
    entry_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PoolEntryRead:
    try:
        entry = await pool_service.cancel_entry(session, entry_id=entry_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return PoolEntryRead.model_validate(entry)


@router.delete(
    "/entries/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a pool pass",
)
async def delete_entry(
    entry_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    if not await pool_service.delete_entry(session, entry_id=entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pool entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/occupancy", response_model=PoolOccupancyRead, summary="Pool head count for a day")
async def occupancy(
    day: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> PoolOccupancyRead:
    result = await pool_service.occupancy_by_date(session, catalog=catalog, day=day)
    return PoolOccupancyRead.model_validate(result)


@router.get("/revenue", response_model=PoolRevenueRead, summary="Pool revenue for a day")
async def revenue(
    day: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> PoolRevenueRead:
    result = await pool_service.revenue_by_date(session, catalog=catalog, day=day)
    return PoolRevenueRead.model_validate(result)


@router.get("/stats", response_model=PoolRangeStatsRead, summary="Pool figures for a range")
async def stats(
    start_date: date,
    end_date: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> PoolRangeStatsRead:
    try:
        result = await pool_service.stats_by_range(
            session, catalog=catalog, start_date=start_date, end_date=end_date
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return PoolRangeStatsRead.model_validate(result)
