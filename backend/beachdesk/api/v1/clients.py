"""Client directory endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import ClassificationConfig
from beachdesk.core.errors import LedgerError
from beachdesk.models.client import ClientClassification
from beachdesk.schemas.client import (
    BlacklistRequest,
    ClientCreate,
    ClientRead,
    ClientStatsRead,
    ClientUpdate,
)
from beachdesk.schemas.rental import RentalRead
from beachdesk.services import client_service, reservation_service

router = APIRouter()


@router.get("", response_model=list[ClientRead], summary="List or search clients")
async def list_clients(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    q: str | None = None,
    classification: ClientClassification | None = None,
) -> list[ClientRead]:
    if classification is not None:
        clients = await client_service.list_by_classification(
            session, classification=classification
        )
    else:
        clients = await client_service.search_clients(session, query=q or "")
    return [ClientRead.model_validate(client) for client in clients]


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a client",
)
async def create_client(
    payload: ClientCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    try:
        client = await client_service.save_client(session, **payload.model_dump())
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return ClientRead.model_validate(client)


@router.get("/stats", response_model=ClientStatsRead, summary="Clients per tier")
async def client_stats(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientStatsRead:
    return ClientStatsRead(**await client_service.client_stats(session))


@router.get("/by-national-id/{national_id}", response_model=ClientRead, summary="Find by national id")
async def get_by_national_id(
    national_id: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    client = await client_service.get_by_national_id(session, national_id=national_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ClientRead.model_validate(client)


@router.get("/{client_id}", response_model=ClientRead, summary="Get client")
async def get_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    client = await client_service.get_client(session, client_id=client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ClientRead.model_validate(client)


@router.patch("/{client_id}", response_model=ClientRead, summary="Update client")
async def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    try:
        client = await client_service.save_client(
            session, client_id=client_id, **payload.model_dump(exclude_unset=True)
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete client",
)
async def delete_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    deleted = await client_service.delete_client(session, client_id=client_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{client_id}/rentals",
    response_model=list[RentalRead],
    summary="Rental history of a client",
)
async def client_rentals(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[RentalRead]:
    rentals = await reservation_service.list_by_client(session, client_id=client_id)
    return [RentalRead.model_validate(rental) for rental in rentals]


@router.post("/{client_id}/blacklist", response_model=ClientRead, summary="Blacklist client")
async def blacklist_client(
    client_id: uuid.UUID,
    payload: BlacklistRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    try:
        client = await client_service.mark_blacklist(
            session, client_id=client_id, reason=payload.reason
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}/blacklist",
    response_model=ClientRead,
    summary="Remove client from blacklist",
)
async def unblacklist_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    classification: Annotated[ClassificationConfig, Depends(deps.get_classification_config)],
) -> ClientRead:
    try:
        client = await client_service.remove_from_blacklist(
            session, client_id=client_id, config=classification
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return ClientRead.model_validate(client)
