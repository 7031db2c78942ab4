"""Rental booking and lifecycle endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.catalog import ClassificationConfig, ResourceCatalog
from beachdesk.core.errors import LedgerError
from beachdesk.schemas.payment import PaymentRead, PaymentSummaryRead
from beachdesk.schemas.rental import (
    RentalBookingRead,
    RentalCreate,
    RentalMoveRequest,
    RentalRead,
    RentalUpdate,
    UnitStatusRead,
)
from beachdesk.services import payment_service, rental_service, reservation_service

router = APIRouter()


@router.get("", response_model=list[RentalRead], summary="List or search rentals")
async def list_rentals(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    start_date: date | None = None,
    end_date: date | None = None,
    client_id: uuid.UUID | None = None,
    include_cancelled: bool = True,
    q: str | None = None,
    payment_status: str | None = None,
    resource_type: str | None = None,
    rental_status: Annotated[str | None, Query(alias="status")] = None,
) -> list[RentalRead]:
    if q is not None:
        try:
            rentals = await reservation_service.search_rentals(
                session,
                catalog=catalog,
                query=q,
                payment_status=payment_status,
                resource_type=resource_type,
                start_date=start_date,
                end_date=end_date,
                status=rental_status,
                include_cancelled=include_cancelled,
            )
        except LedgerError as exc:
            raise deps.http_error(exc) from exc
    elif client_id is not None:
        rentals = await reservation_service.list_by_client(
            session, client_id=client_id, include_cancelled=include_cancelled
        )
    elif start_date is not None or end_date is not None:
        rentals = await reservation_service.list_by_date_range(
            session,
            start_date=start_date or date.min,
            end_date=end_date or date.max,
            include_cancelled=include_cancelled,
        )
    else:
        rentals = await reservation_service.list_rentals(
            session, include_cancelled=include_cancelled
        )
    return [RentalRead.model_validate(rental) for rental in rentals]


@router.post(
    "",
    response_model=RentalBookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book a unit",
)
async def create_rental(
    payload: RentalCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    classification: Annotated[ClassificationConfig, Depends(deps.get_classification_config)],
) -> RentalBookingRead:
    try:
        result = await rental_service.book_rental(
            session,
            catalog=catalog,
            classification=classification,
            **payload.model_dump(),
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    booking = RentalRead.model_validate(result.rental)
    return RentalBookingRead(
        **booking.model_dump(),
        parking=RentalRead.model_validate(result.parking) if result.parking else None,
        parking_error=result.parking_error,
    )


@router.get("/{rental_id}", response_model=RentalRead, summary="Get rental")
async def get_rental(
    rental_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RentalRead:
    rental = await reservation_service.get_rental(session, rental_id=rental_id)
    if rental is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rental not found")
    return RentalRead.model_validate(rental)


@router.patch("/{rental_id}", response_model=RentalRead, summary="Update rental")
async def update_rental(
    rental_id: uuid.UUID,
    payload: RentalUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    classification: Annotated[ClassificationConfig, Depends(deps.get_classification_config)],
) -> RentalRead:
    try:
        rental = await rental_service.update_rental(
            session,
            classification=classification,
            rental_id=rental_id,
            **payload.model_dump(exclude_unset=True),
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return RentalRead.model_validate(rental)


@router.post("/{rental_id}/move", response_model=RentalRead, summary="Move to another unit")
async def move_rental(
    rental_id: uuid.UUID,
    payload: RentalMoveRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
) -> RentalRead:
    try:
        rental = await rental_service.move_rental(
            session,
            catalog=catalog,
            rental_id=rental_id,
            new_unit_number=payload.unit_number,
        )
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return RentalRead.model_validate(rental)


@router.post("/{rental_id}/cancel", response_model=RentalRead, summary="Cancel rental")
async def cancel_rental(
    rental_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    classification: Annotated[ClassificationConfig, Depends(deps.get_classification_config)],
) -> RentalRead:
    cancelled = await rental_service.cancel_rental(
        session, classification=classification, rental_id=rental_id
    )
    if not cancelled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rental not found")
    rental = await reservation_service.get_rental(session, rental_id=rental_id)
    return RentalRead.model_validate(rental)


@router.delete(
    "/{rental_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Permanently delete rental",
)
async def delete_rental(
    rental_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    deleted = await reservation_service.delete_rental(session, rental_id=rental_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rental not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{rental_id}/payments",
    response_model=PaymentSummaryRead,
    summary="Payment summary for a rental",
)
async def rental_payments(
    rental_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PaymentSummaryRead:
    try:
        summary = await payment_service.payment_summary(session, rental_id=rental_id)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return PaymentSummaryRead(
        rental_id=summary.rental_id,
        total_price=summary.total_price,
        paid_amount=summary.paid_amount,
        pending_amount=summary.pending_amount,
        percentage=summary.percentage,
        fully_paid=summary.fully_paid,
        payment_count=summary.payment_count,
        payments=[PaymentRead.model_validate(p) for p in summary.payments],
    )


@router.get(
    "/units/{resource_type}/{unit_number}/status",
    response_model=UnitStatusRead,
    summary="Current status of a unit",
)
async def unit_status(
    resource_type: str,
    unit_number: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    catalog: Annotated[ResourceCatalog, Depends(deps.get_catalog)],
    reference_date: Annotated[date | None, Query()] = None,
) -> UnitStatusRead:
    spec = deps.resolve_catalog_type(catalog, resource_type)
    result = await rental_service.calculate_unit_status(
        session,
        resource_type=spec.type,
        unit_number=unit_number,
        reference_date=reference_date or date.today(),
    )
    return UnitStatusRead.model_validate(result)
