"""Payment ledger endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.errors import LedgerError
from beachdesk.schemas.payment import MethodStatsRead, PaymentCreate, PaymentRead
from beachdesk.services import payment_service

router = APIRouter()


@router.post(
    "",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
)
async def add_payment(
    payload: PaymentCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PaymentRead:
    try:
        payment = await payment_service.add_payment(session, **payload.model_dump())
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
    return PaymentRead.model_validate(payment)


@router.get("", response_model=list[PaymentRead], summary="List payments")
async def list_payments(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    rental_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[PaymentRead]:
    if rental_id is not None:
        payments = await payment_service.list_by_rental(session, rental_id=rental_id)
    elif start_date is not None or end_date is not None:
        payments = await payment_service.list_by_period(
            session,
            start_date=start_date or date.min,
            end_date=end_date or date.max,
        )
    else:
        payments = await payment_service.list_payments(session)
    return [PaymentRead.model_validate(payment) for payment in payments]


@router.get(
    "/stats/by-method",
    response_model=list[MethodStatsRead],
    summary="Payment totals per method",
)
async def stats_by_method(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[MethodStatsRead]:
    stats = await payment_service.stats_by_method(session)
    return [MethodStatsRead.model_validate(item) for item in stats]


@router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a payment",
)
async def delete_payment(
    payment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    deleted = await payment_service.delete_payment(session, payment_id=payment_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
