"""Rental lifecycle: booking, editing, moving and cancelling units."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import ClassificationConfig, ResourceCatalog
from beachdesk.core.config import get_settings
from beachdesk.core.errors import ConflictError, NotFound, ValidationError
from beachdesk.models import (
    Client,
    ClientClassification,
    PaymentMethod,
    Rental,
    RentalStatus,
    ResourceType,
)
from beachdesk.services import (
    availability_service,
    client_service,
    payment_service,
    pricing_service,
    reservation_service,
)

logger = logging.getLogger(__name__)

INITIAL_PAYMENT_NOTE = "Initial payment at booking"
_CENTS = Decimal("0.01")


@dataclass(slots=True)
class PriceBreakdown:
    base_price: Decimal
    discount: Decimal
    discount_percentage: Decimal
    total_price: Decimal
    classification: ClientClassification


@dataclass(slots=True)
class UnitStatus:
    """Snapshot of one unit relative to a reference date."""

    status: str
    payment_status: str | None = None
    rental_id: uuid.UUID | None = None
    client_id: uuid.UUID | None = None
    client_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    days_remaining: int | None = None
    amount_due: Decimal | None = None
    days_until_check_in: int | None = None
    days_until_next_reservation: int | None = None


def calculate_days(start_date: date, end_date: date) -> int:
    """Inclusive number of days billed for a stay."""
    return (end_date - start_date).days + 1


def calculate_total_price(
    price_per_day: Decimal,
    days: int,
    classification: ClientClassification | None,
    config: ClassificationConfig,
) -> PriceBreakdown:
    base = Decimal(price_per_day) * days
    percentage = client_service.discount_percentage(classification, config)
    discount = (base * percentage / 100).quantize(_CENTS)
    return PriceBreakdown(
        base_price=base,
        discount=discount,
        discount_percentage=percentage,
        total_price=base - discount,
        classification=classification or ClientClassification.REGULAR,
    )


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def _to_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _validate_contact(name: str, phone: str, national_id: str) -> list[str]:
    errors: list[str] = []
    if not name:
        errors.append("Client name is required")
    if not phone:
        errors.append("Phone is required")
    elif len(phone) != 10:
        errors.append("Phone must have 10 digits")
    if not national_id:
        errors.append("National id is required")
    elif len(national_id) not in (7, 8):
        errors.append("National id must have 7 or 8 digits")
    return errors


async def _resolve_client(
    session: AsyncSession,
    *,
    client_id: uuid.UUID | None,
    national_id: str,
) -> Client | None:
    if client_id is not None:
        client = await client_service.get_client(session, client_id=client_id)
        if client is not None:
            return client
    return await client_service.get_by_national_id(session, national_id=national_id)


async def create_rental(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    classification: ClassificationConfig,
    resource_type: ResourceType | str | None,
    unit_number: Any,
    start_date: Any,
    end_date: Any,
    client_name: str | None,
    client_phone: str | None,
    client_national_id: str | None,
    price_per_day: Any,
    client_id: uuid.UUID | None = None,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
    amount_paid: Any = None,
    notes: str | None = None,
) -> Rental:
    """Validate and book a unit.

    Every validation problem is reported at once through ``ValidationError``.
    A range clash with an existing booking raises ``ConflictError`` when it is
    the only problem.
    """
    name = (client_name or "").strip()
    phone = client_service.digits_only(client_phone)
    national_id = client_service.digits_only(client_national_id)
    unit = _to_int(unit_number)
    start = _to_date(start_date)
    end = _to_date(end_date)
    price = _to_decimal(price_per_day)
    initial_payment = _to_decimal(amount_paid)

    errors: list[str] = []
    spec = None
    if not resource_type:
        errors.append("Resource type is required")
    else:
        spec = catalog.get(resource_type)
        if spec is None:
            errors.append(f"Invalid resource type: {resource_type}")
        elif spec.capacity_based:
            errors.append(f"{spec.label} is booked by head count, not by unit")
            spec = None
    if unit is None or unit < 1:
        errors.append("Unit number is invalid")
    elif spec is not None and unit > spec.total:
        errors.append(f"Unit number cannot be greater than {spec.total}")
    if start is None:
        errors.append("Start date is required")
    if end is None:
        errors.append("End date is required")
    errors.extend(_validate_contact(name, phone, national_id))
    if price is None or price <= 0:
        errors.append("Price per day must be greater than 0")
    if initial_payment is None:
        if amount_paid not in (None, ""):
            errors.append("Initial payment is not a valid amount")
        initial_payment = Decimal("0")
    elif initial_payment < 0:
        errors.append("Initial payment cannot be negative")
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        errors.append(f"Invalid payment method: {payment_method}")
        method = PaymentMethod.CASH

    season = catalog.season
    if start is not None and end is not None:
        if start > end:
            errors.append("Start date must be on or before end date")
        if not season.contains(start):
            errors.append(
                f"Start date must be within the season ({season.start_date} to {season.end_date})"
            )
        if not season.contains(end):
            errors.append(
                f"End date must be within the season ({season.start_date} to {season.end_date})"
            )

    conflict = None
    if spec is not None and unit is not None and 1 <= unit <= spec.total and start and end:
        conflict = await availability_service.find_conflict(
            session,
            resource_type=spec.type,
            unit_number=unit,
            start_date=start,
            end_date=end,
        )
        if conflict is not None and errors:
            errors.append("The unit is not available on the selected dates")

    if errors:
        logger.warning("Rental rejected: %s", errors)
        raise ValidationError(errors)
    if conflict is not None:
        day, other = conflict
        logger.warning(
            "Rental rejected: %s on %s already booked by rental %s",
            spec.unit_label(unit),
            day,
            other.id,
        )
        raise ConflictError(
            f"Unit {spec.unit_label(unit)} is not available on {day.isoformat()}",
            conflict_date=day,
            conflicting_rental_id=other.id,
            conflicting_client_name=other.client_name,
        )

    client = await _resolve_client(session, client_id=client_id, national_id=national_id)
    days = calculate_days(start, end)
    breakdown = calculate_total_price(
        price, days, client.classification if client else None, classification
    )
    if initial_payment > breakdown.total_price:
        raise ValidationError("Initial payment cannot exceed the rental total")

    if client is None:
        client = await client_service.save_client(
            session, full_name=name, national_id=national_id, phone=phone
        )

    rental = Rental(
        resource_type=spec.type,
        unit_number=unit,
        start_date=start,
        end_date=end,
        client_id=client.id,
        client_name=name,
        client_phone=phone,
        client_national_id=national_id,
        price_per_day=price,
        base_price=breakdown.base_price,
        discount=breakdown.discount,
        discount_percentage=breakdown.discount_percentage,
        total_price=breakdown.total_price,
        payment_method=method,
        status=RentalStatus.ACTIVE,
        notes=(notes or "").strip() or None,
    )
    rental = await reservation_service.create_rental_record(session, rental=rental)
    logger.info(
        "Rental %s created for %s %s to %s",
        rental.id,
        spec.unit_label(unit),
        start,
        end,
    )

    await client_service.update_stats(
        session,
        client_id=client.id,
        amount=rental.total_price,
        reservation_date=start,
        config=classification,
    )
    if initial_payment > 0:
        await payment_service.add_payment(
            session,
            rental_id=rental.id,
            amount=initial_payment,
            method=method,
            payment_date=date.today(),
            notes=INITIAL_PAYMENT_NOTE,
        )
    return rental


@dataclass(slots=True)
class BookingResult:
    """A booked rental plus the parking spot bundled with it, if any."""

    rental: Rental
    parking: Rental | None = None
    parking_error: str | None = None


_PARKING_COMPANIONS = (ResourceType.UMBRELLA, ResourceType.TENT)


async def book_rental(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    classification: ClassificationConfig,
    include_parking: bool = False,
    parking_price_per_day: Any = None,
    parking_payment_method: PaymentMethod | str | None = None,
    parking_amount_paid: Any = None,
    **booking: Any,
) -> BookingResult:
    """Book a unit and optionally the first free parking spot for the same stay.

    The main booking follows ``create_rental``. A parking spot that cannot be
    assigned never undoes it; the reason is returned in ``parking_error``.
    """
    rental = await create_rental(
        session, catalog=catalog, classification=classification, **booking
    )
    result = BookingResult(rental=rental)
    if not include_parking:
        return result
    if rental.resource_type not in _PARKING_COMPANIONS:
        result.parking_error = "Parking can only be bundled with an umbrella or a tent"
        return result
    if catalog.get(ResourceType.PARKING) is None:
        result.parking_error = "The establishment has no parking spots"
        return result

    spot = await availability_service.find_first_available_unit(
        session,
        catalog=catalog,
        resource_type=ResourceType.PARKING,
        start_date=rental.start_date,
        end_date=rental.end_date,
    )
    if spot is None:
        logger.warning(
            "No parking spot free from %s to %s for rental %s",
            rental.start_date,
            rental.end_date,
            rental.id,
        )
        result.parking_error = "No parking spots are available for these dates"
        return result

    price = parking_price_per_day
    if price is None:
        price = await pricing_service.suggest_price_for_range(
            session,
            catalog=catalog,
            resource_type=ResourceType.PARKING,
            start_date=rental.start_date,
            end_date=rental.end_date,
        )
    try:
        result.parking = await create_rental(
            session,
            catalog=catalog,
            classification=classification,
            resource_type=ResourceType.PARKING,
            unit_number=spot,
            start_date=rental.start_date,
            end_date=rental.end_date,
            client_id=rental.client_id,
            client_name=rental.client_name,
            client_phone=rental.client_phone,
            client_national_id=rental.client_national_id,
            price_per_day=price,
            payment_method=parking_payment_method or rental.payment_method,
            amount_paid=parking_amount_paid,
        )
    except (ValidationError, ConflictError) as exc:
        logger.warning("Parking not assigned for rental %s: %s", rental.id, exc)
        result.parking_error = str(exc)
    return result


async def _require(session: AsyncSession, rental_id: uuid.UUID) -> Rental:
    rental = await reservation_service.get_rental(session, rental_id=rental_id)
    if rental is None:
        raise NotFound("Rental", rental_id)
    return rental


async def update_rental(
    session: AsyncSession,
    *,
    classification: ClassificationConfig,
    rental_id: uuid.UUID,
    client_name: str | None = None,
    client_phone: str | None = None,
    client_national_id: str | None = None,
    price_per_day: Any = None,
    payment_method: PaymentMethod | str | None = None,
    notes: str | None = None,
) -> Rental:
    """Edit contact and pricing fields; dates and unit stay as booked."""
    rental = await _require(session, rental_id)
    if rental.status is RentalStatus.CANCELLED:
        raise ValidationError("Cannot edit a cancelled rental")

    name = rental.client_name if client_name is None else client_name.strip()
    phone = (
        rental.client_phone
        if client_phone is None
        else client_service.digits_only(client_phone)
    )
    national_id = (
        rental.client_national_id
        if client_national_id is None
        else client_service.digits_only(client_national_id)
    )
    price = (
        Decimal(rental.price_per_day)
        if price_per_day is None
        else _to_decimal(price_per_day)
    )

    errors = _validate_contact(name, phone, national_id)
    if price is None or price <= 0:
        errors.append("Price per day must be greater than 0")
    method = rental.payment_method
    if payment_method is not None:
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            errors.append(f"Invalid payment method: {payment_method}")
    if errors:
        raise ValidationError(errors)

    client = None
    if rental.client_id is not None:
        client = await client_service.get_client(session, client_id=rental.client_id)
    breakdown = calculate_total_price(
        price,
        rental.days,
        client.classification if client else None,
        classification,
    )

    rental.client_name = name
    rental.client_phone = phone
    rental.client_national_id = national_id
    rental.price_per_day = price
    rental.base_price = breakdown.base_price
    rental.discount = breakdown.discount
    rental.discount_percentage = breakdown.discount_percentage
    rental.total_price = breakdown.total_price
    rental.payment_method = method
    if notes is not None:
        rental.notes = notes.strip() or None
    rental = await reservation_service.update_rental_record(
        session, rental_id=rental_id, rental=rental
    )
    logger.info("Rental %s updated", rental_id)
    return rental


async def move_rental(
    session: AsyncSession,
    *,
    catalog: ResourceCatalog,
    rental_id: uuid.UUID,
    new_unit_number: int,
) -> Rental:
    """Move a booking to another unit of the same type, keeping its dates."""
    rental = await _require(session, rental_id)
    if rental.status is RentalStatus.CANCELLED:
        raise ValidationError("Cannot move a cancelled rental")
    spec = catalog.get(rental.resource_type)
    if spec is None:
        raise ValidationError("Invalid unit type")
    if not 1 <= new_unit_number <= spec.total:
        raise ValidationError(f"Unit number must be between 1 and {spec.total}")
    if new_unit_number == rental.unit_number:
        raise ValidationError("The rental is already on that unit")

    conflict = await availability_service.find_conflict(
        session,
        resource_type=rental.resource_type,
        unit_number=new_unit_number,
        start_date=rental.start_date,
        end_date=rental.end_date,
        exclude_rental_id=rental.id,
    )
    if conflict is not None:
        day, other = conflict
        raise ConflictError(
            f"Unit {spec.unit_label(new_unit_number)} is not available on "
            f"{day.isoformat()}; already booked by {other.client_name}",
            conflict_date=day,
            conflicting_rental_id=other.id,
            conflicting_client_name=other.client_name,
        )

    previous = rental.unit_number
    rental.unit_number = new_unit_number
    rental = await reservation_service.update_rental_record(
        session, rental_id=rental_id, rental=rental
    )
    logger.info(
        "Rental %s moved from %s to %s",
        rental_id,
        spec.unit_label(previous),
        spec.unit_label(new_unit_number),
    )
    return rental


async def cancel_rental(
    session: AsyncSession,
    *,
    classification: ClassificationConfig,
    rental_id: uuid.UUID,
) -> bool:
    """Mark a rental cancelled. The record is kept; its unit becomes free."""
    rental = await reservation_service.get_rental(session, rental_id=rental_id)
    if rental is None:
        logger.warning("Cancel requested for unknown rental %s", rental_id)
        return False
    if rental.status is RentalStatus.CANCELLED:
        return True
    rental.status = RentalStatus.CANCELLED
    await reservation_service.update_rental_record(
        session, rental_id=rental_id, rental=rental
    )
    logger.info("Rental %s cancelled", rental_id)
    if rental.client_id is not None:
        await client_service.recompute_stats(
            session, client_id=rental.client_id, config=classification
        )
    return True


async def calculate_unit_status(
    session: AsyncSession,
    *,
    resource_type: ResourceType,
    unit_number: int,
    reference_date: date,
) -> UnitStatus:
    settings = get_settings()
    rentals = await reservation_service.list_for_unit(
        session, resource_type=resource_type, unit_number=unit_number
    )

    current = next((r for r in rentals if r.covers(reference_date)), None)
    if current is not None:
        paid = await payment_service.paid_amount(session, rental_id=current.id)
        amount_due = Decimal(current.total_price) - paid
        return UnitStatus(
            status="overdue" if reference_date > current.end_date else "occupied",
            payment_status=(
                "partial" if amount_due > settings.payment_tolerance else "paid"
            ),
            rental_id=current.id,
            client_id=current.client_id,
            client_name=current.client_name,
            start_date=current.start_date,
            end_date=current.end_date,
            days_remaining=abs((current.end_date - reference_date).days + 1),
            amount_due=max(amount_due, Decimal("0")),
        )

    upcoming = next((r for r in rentals if r.start_date > reference_date), None)
    if upcoming is None:
        return UnitStatus(status="free")
    days_until = (upcoming.start_date - reference_date).days
    if days_until <= settings.reserved_horizon_days:
        return UnitStatus(
            status="reserved",
            rental_id=upcoming.id,
            client_id=upcoming.client_id,
            client_name=upcoming.client_name,
            start_date=upcoming.start_date,
            end_date=upcoming.end_date,
            days_until_check_in=days_until,
        )
    return UnitStatus(status="free", days_until_next_reservation=days_until)
