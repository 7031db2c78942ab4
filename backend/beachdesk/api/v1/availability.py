"""Unit availability endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import ResourceCatalog
from beachdesk.schemas.reporting import AvailabilitySummaryRead, FirstAvailableUnitRead
from beachdesk.services import availability_service

router = APIRouter()


def _check_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start_date must be on or before end_date",
        )


@router.get(
    "/{resource_type}/units/{unit_number}",
    summary="Whether a unit is free for a whole range",
)
async def unit_availability(
    resource_type: str,
    unit_number: int,
    start_date: date,
    end_date: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> dict[str, object]:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    _check_range(start_date, end_date)
    conflict = await availability_service.find_conflict(
        session,
        resource_type=spec.type,
        unit_number=unit_number,
        start_date=start_date,
        end_date=end_date,
    )
    body: dict[str, object] = {
        "resource_type": spec.type.value,
        "unit_number": unit_number,
        "available": conflict is None,
    }
    if conflict is not None:
        day, rental = conflict
        body["conflict_date"] = day.isoformat()
        body["conflicting_rental_id"] = str(rental.id)
    return body


@router.get(
    "/{resource_type}/first-available",
    response_model=FirstAvailableUnitRead,
    summary="Lowest unit free for a whole range",
)
async def first_available_unit(
    resource_type: str,
    start_date: date,
    end_date: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> FirstAvailableUnitRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    _check_range(start_date, end_date)
    unit = await availability_service.find_first_available_unit(
        session,
        catalog=catalog,
        resource_type=spec.type,
        start_date=start_date,
        end_date=end_date,
    )
    return FirstAvailableUnitRead(
        resource_type=spec.type,
        start_date=start_date,
        end_date=end_date,
        unit_number=unit,
    )


@router.get(
    "/{resource_type}",
    response_model=AvailabilitySummaryRead,
    summary="Free and occupied unit counts for a day",
)
async def availability_summary(
    resource_type: str,
    day: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> AvailabilitySummaryRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    summary = await availability_service.availability_summary(
        session, catalog=catalog, resource_type=spec.type, day=day
    )
    return AvailabilitySummaryRead.model_validate(summary)


@router.get(
    "/{resource_type}/free",
    response_model=list[int],
    summary="Unit numbers free on a day",
)
async def free_units(
    resource_type: str,
    day: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> list[int]:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    return await availability_service.available_units(
        session, catalog=catalog, resource_type=spec.type, day=day
    )
