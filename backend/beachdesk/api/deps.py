"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import (
    ClassificationConfig,
    PoolSettings,
    ResourceCatalog,
    ResourceSpec,
)
from beachdesk.core.errors import (
    ConflictError,
    LedgerError,
    NotFound,
    OverpaymentError,
    PersistenceError,
    ValidationError,
)
from beachdesk.db.session import get_session
from beachdesk.services import establishment_service

_STATUS_BY_ERROR: tuple[tuple[type[LedgerError], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (OverpaymentError, status.HTTP_400_BAD_REQUEST),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_catalog(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ResourceCatalog:
    return await establishment_service.load_catalog(session)


async def get_classification_config(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ClassificationConfig:
    return await establishment_service.load_classification_config(session)


async def get_pool_settings(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PoolSettings:
    return await establishment_service.load_pool_settings(session)


def http_error(exc: LedgerError) -> HTTPException:
    """Translate an engine failure into the matching HTTP error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.to_dict())
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict())


def resolve_catalog_type(catalog: ResourceCatalog, resource_type: str) -> ResourceSpec:
    spec = catalog.get(resource_type)
    if spec is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown resource type: {resource_type}",
        )
    return spec

