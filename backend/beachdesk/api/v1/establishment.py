"""Establishment configuration endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import ClassificationConfig, PoolSettings, ResourceCatalog
from beachdesk.core.errors import LedgerError
from beachdesk.schemas.establishment import (
    ClassificationConfigSchema,
    EstablishmentRead,
    PoolSettingsSchema,
    ResourceReconfigure,
    ResourceSpecRead,
)
from beachdesk.services import establishment_service

router = APIRouter()


async def _read(session: AsyncSession) -> EstablishmentRead:
    config = await establishment_service.get_or_create_config(session)
    catalog = establishment_service.catalog_from_config(config)
    return EstablishmentRead(
        name=config.name,
        location=config.location,
        season_start=config.season_start,
        season_end=config.season_end,
        special_window_start=config.special_window_start,
        special_window_days=config.special_window_days,
        special_window_label=config.special_window_label,
        resources=[
            ResourceSpecRead(
                type=spec.type.value,
                total=spec.total,
                prefix=spec.prefix,
                label=spec.label,
                icon=spec.icon,
                capacity_based=spec.capacity_based,
            )
            for spec in catalog.resources
        ],
    )


@router.get("", response_model=EstablishmentRead, summary="Establishment configuration")
async def get_establishment(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> EstablishmentRead:
    return await _read(session)


@router.put(
    "/resources",
    response_model=EstablishmentRead,
    summary="Reconfigure resources (wipes rentals, payments, prices and pool entries)",
)
async def reconfigure_resources(
    payload: ResourceReconfigure,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> EstablishmentRead:
    try:
        await establishment_service.reconfigure_resources(
            session, **payload.model_dump()
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return await _read(session)


@router.get(
    "/classification",
    response_model=ClassificationConfigSchema,
    summary="Client classification thresholds",
)
async def get_classification(
    classification: Annotated[ClassificationConfig, Depends(deps.get_classification_config)],
) -> ClassificationConfigSchema:
    return ClassificationConfigSchema.model_validate(classification)


@router.put(
    "/classification",
    response_model=ClassificationConfigSchema,
    summary="Update thresholds and reclassify clients",
)
async def update_classification(
    payload: ClassificationConfigSchema,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClassificationConfigSchema:
    try:
        saved = await establishment_service.save_classification_config(
            session, classification=ClassificationConfig(**payload.model_dump())
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return ClassificationConfigSchema.model_validate(saved)


@router.get("/pool", response_model=PoolSettingsSchema, summary="Pool prices")
async def get_pool_settings(
    pool_settings: Annotated[PoolSettings, Depends(deps.get_pool_settings)],
) -> PoolSettingsSchema:
    return PoolSettingsSchema.model_validate(pool_settings)


@router.put("/pool", response_model=PoolSettingsSchema, summary="Update pool prices")
async def update_pool_settings(
    payload: PoolSettingsSchema,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PoolSettingsSchema:
    try:
        saved = await establishment_service.save_pool_settings(
            session, pool_settings=PoolSettings(**payload.model_dump())
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return PoolSettingsSchema.model_validate(saved)


@router.get(
    "/catalog",
    response_model=list[ResourceSpecRead],
    summary="Configured resource types",
)
async def list_resources(
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> list[ResourceSpecRead]:
    return [
        ResourceSpecRead(
            type=spec.type.value,
            total=spec.total,
            prefix=spec.prefix,
            label=spec.label,
            icon=spec.icon,
            capacity_based=spec.capacity_based,
        )
        for spec in catalog.resources
    ]
