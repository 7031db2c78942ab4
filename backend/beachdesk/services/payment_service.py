"""Payment ledger: partial payments recorded against rentals."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.errors import NotFound, OverpaymentError, ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import Payment, PaymentMethod, Rental, RentalStatus

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(slots=True)
class PaymentSummary:
    rental_id: uuid.UUID
    total_price: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    percentage: int
    fully_paid: bool
    payment_count: int
    payments: list[Payment] = field(default_factory=list)


@dataclass(slots=True)
class MethodStats:
    method: PaymentMethod
    count: int
    total: Decimal


async def _require_rental(session: AsyncSession, rental_id: uuid.UUID) -> Rental:
    rental = await session.get(Rental, rental_id)
    if rental is None:
        raise NotFound("Rental", rental_id)
    return rental


async def list_by_rental(
    session: AsyncSession, *, rental_id: uuid.UUID
) -> Sequence[Payment]:
    result = await session.execute(
        select(Payment)
        .where(Payment.rental_id == rental_id)
        .order_by(Payment.payment_date, Payment.created_at)
    )
    return result.scalars().all()


async def paid_amount(session: AsyncSession, *, rental_id: uuid.UUID) -> Decimal:
    """Sum of recorded payments; zero when there are none."""
    result = await session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.rental_id == rental_id
        )
    )
    return Decimal(result.scalar_one())


async def paid_amounts(
    session: AsyncSession, *, rental_ids: Sequence[uuid.UUID] | None = None
) -> dict[uuid.UUID, Decimal]:
    stmt = select(Payment.rental_id, func.sum(Payment.amount)).group_by(
        Payment.rental_id
    )
    if rental_ids is not None:
        stmt = stmt.where(Payment.rental_id.in_(list(rental_ids)))
    result = await session.execute(stmt)
    return {rental_id: Decimal(total) for rental_id, total in result.all()}


async def pending_amount(session: AsyncSession, *, rental_id: uuid.UUID) -> Decimal:
    """``total_price - paid``, signed. Raises ``NotFound`` for unknown rentals."""
    rental = await _require_rental(session, rental_id)
    return Decimal(rental.total_price) - await paid_amount(session, rental_id=rental_id)


async def add_payment(
    session: AsyncSession,
    *,
    rental_id: uuid.UUID,
    amount: Decimal,
    method: PaymentMethod = PaymentMethod.CASH,
    payment_date: date | None = None,
    notes: str = "",
) -> Payment:
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid payment amount: {amount!r}") from None
    if not amount.is_finite():
        raise ValidationError("Payment amount must be a finite number")
    if amount <= 0:
        raise ValidationError("Payment amount must be greater than zero")
    rental = await _require_rental(session, rental_id)
    if rental.status is RentalStatus.CANCELLED:
        raise ValidationError("Cannot record a payment on a cancelled rental")

    pending = Decimal(rental.total_price) - await paid_amount(
        session, rental_id=rental_id
    )
    if amount > pending:
        logger.warning(
            "Rejected payment of %s on rental %s (pending %s)",
            amount,
            rental_id,
            pending,
        )
        raise OverpaymentError(amount, pending)

    payment = Payment(
        rental_id=rental_id,
        amount=amount,
        method=PaymentMethod(method),
        payment_date=payment_date or date.today(),
        notes=(notes or "").strip(),
    )
    session.add(payment)
    await commit_or_raise(session)
    await session.refresh(payment)
    logger.info("Payment %s of %s recorded on rental %s", payment.id, amount, rental_id)
    return payment


async def get_payment(session: AsyncSession, *, payment_id: uuid.UUID) -> Payment | None:
    return await session.get(Payment, payment_id)


async def delete_payment(session: AsyncSession, *, payment_id: uuid.UUID) -> bool:
    payment = await session.get(Payment, payment_id)
    if payment is None:
        return False
    await session.delete(payment)
    await commit_or_raise(session)
    logger.info("Payment %s deleted from rental %s", payment_id, payment.rental_id)
    return True


async def payment_summary(
    session: AsyncSession, *, rental_id: uuid.UUID
) -> PaymentSummary:
    rental = await _require_rental(session, rental_id)
    payments = list(await list_by_rental(session, rental_id=rental_id))
    total = Decimal(rental.total_price)
    paid = sum((Decimal(p.amount) for p in payments), ZERO)
    pending = total - paid
    percentage = (
        int((paid / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        if total > 0
        else 0
    )
    return PaymentSummary(
        rental_id=rental_id,
        total_price=total,
        paid_amount=paid,
        pending_amount=max(pending, ZERO),
        percentage=percentage,
        fully_paid=pending <= 0,
        payment_count=len(payments),
        payments=payments,
    )


async def stats_by_method(session: AsyncSession) -> list[MethodStats]:
    result = await session.execute(
        select(Payment.method, func.count(Payment.id), func.sum(Payment.amount))
        .group_by(Payment.method)
    )
    stats = {
        method: MethodStats(method=method, count=count, total=Decimal(total))
        for method, count, total in result.all()
    }
    return [
        stats.get(method, MethodStats(method=method, count=0, total=ZERO))
        for method in PaymentMethod
    ]


async def list_by_period(
    session: AsyncSession, *, start_date: date, end_date: date
) -> Sequence[Payment]:
    result = await session.execute(
        select(Payment)
        .where(Payment.payment_date >= start_date, Payment.payment_date <= end_date)
        .order_by(Payment.payment_date, Payment.created_at)
    )
    return result.scalars().all()


async def list_payments(session: AsyncSession) -> Sequence[Payment]:
    result = await session.execute(
        select(Payment).order_by(Payment.payment_date, Payment.created_at)
    )
    return result.scalars().all()
