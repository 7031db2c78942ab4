"""Dashboard and reporting endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import ResourceCatalog
from beachdesk.schemas.reporting import (
    DashboardRead,
    OccupancyPointRead,
    ResourceIncomeRead,
)
from beachdesk.services import analytics_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardRead, summary="Dashboard metrics")
async def dashboard(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    reference_date: date | None = None,
) -> DashboardRead:
    metrics = await analytics_service.dashboard_metrics(
        session, catalog=catalog, reference_date=reference_date or date.today()
    )
    return DashboardRead.model_validate(metrics, from_attributes=True)


@router.get(
    "/occupancy",
    response_model=list[OccupancyPointRead],
    summary="Daily occupancy around a date",
)
async def occupancy_window(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    reference_date: date | None = None,
    days_before: Annotated[int, Query(ge=0, le=90)] = 7,
    days_after: Annotated[int, Query(ge=0, le=90)] = 7,
) -> list[OccupancyPointRead]:
    points = await analytics_service.occupancy_window(
        session,
        catalog=catalog,
        reference_date=reference_date or date.today(),
        days_before=days_before,
        days_after=days_after,
    )
    return [OccupancyPointRead.model_validate(point) for point in points]


@router.get(
    "/top-resources",
    response_model=list[ResourceIncomeRead],
    summary="Units ranked by income",
)
async def top_resources(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    limit: Annotated[int, Query(ge=1, le=100)] = 5,
) -> list[ResourceIncomeRead]:
    ranked = await analytics_service.top_resources(session, catalog=catalog, limit=limit)
    return [ResourceIncomeRead.model_validate(item) for item in ranked]
