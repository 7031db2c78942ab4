"""Tests for booking, editing, moving and cancelling rentals."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest

from beachdesk.core.errors import ConflictError, NotFound, ValidationError
from beachdesk.db.session import get_sessionmaker
from beachdesk.models import ClientClassification, RentalStatus, ResourceType
from beachdesk.services import (
    availability_service,
    client_service,
    payment_service,
    rental_service,
)

pytestmark = pytest.mark.asyncio


async def _book(session, catalog, classification, **overrides):
    payload = {
        "resource_type": "umbrella",
        "unit_number": 1,
        "start_date": date(2025, 12, 10),
        "end_date": date(2025, 12, 15),
        "client_name": "Lucia Fernandez",
        "client_phone": "(226) 212-3456",
        "client_national_id": "30.111.222",
        "price_per_day": Decimal("1000"),
    }
    payload.update(overrides)
    return await rental_service.create_rental(
        session, catalog=catalog, classification=classification, **payload
    )


def test_total_price_applies_tier_discount(classification) -> None:
    regular = rental_service.calculate_total_price(
        Decimal("1000"), 6, ClientClassification.REGULAR, classification
    )
    assert regular.total_price == Decimal("6000")
    assert regular.discount == Decimal("0")

    vip = rental_service.calculate_total_price(
        Decimal("1000"), 6, ClientClassification.VIP, classification
    )
    assert vip.base_price == Decimal("6000")
    assert vip.discount == Decimal("600.00")
    assert vip.total_price == Decimal("5400")

    blacklisted = rental_service.calculate_total_price(
        Decimal("1000"), 6, ClientClassification.BLACKLIST, classification
    )
    assert blacklisted.total_price == Decimal("6000")


async def test_overlapping_booking_on_shared_day_conflicts(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rental = await _book(session, catalog, classification)
        assert rental.days == 6
        assert rental.total_price == Decimal("6000")
        assert rental.client_phone == "2262123456"
        assert rental.client_national_id == "30111222"

        with pytest.raises(ConflictError) as excinfo:
            await _book(
                session,
                catalog,
                classification,
                start_date=date(2025, 12, 15),
                end_date=date(2025, 12, 20),
            )
        assert excinfo.value.conflict_date == date(2025, 12, 15)
        assert excinfo.value.conflicting_rental_id == rental.id
        assert excinfo.value.conflicting_client_name == "Lucia Fernandez"

        # the next unit is free
        other = await _book(
            session,
            catalog,
            classification,
            unit_number=2,
            start_date=date(2025, 12, 15),
            end_date=date(2025, 12, 20),
        )
        assert other.unit_number == 2


async def test_create_rental_collects_every_validation_error(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError) as excinfo:
            await _book(
                session,
                catalog,
                classification,
                unit_number=51,
                start_date=date(2025, 11, 20),
                client_phone="123",
                client_national_id="",
                price_per_day=0,
            )
        messages = excinfo.value.errors
        assert "Unit number cannot be greater than 50" in messages
        assert "Phone must have 10 digits" in messages
        assert "National id is required" in messages
        assert "Price per day must be greater than 0" in messages
        assert any(m.startswith("Start date must be within the season") for m in messages)

        with pytest.raises(ValidationError):
            await _book(session, catalog, classification, resource_type="pool")
        with pytest.raises(ValidationError):
            await _book(
                session,
                catalog,
                classification,
                start_date=date(2025, 12, 16),
                end_date=date(2025, 12, 15),
            )


async def test_booking_creates_client_and_initial_payment(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rental = await _book(
            session, catalog, classification, amount_paid="2500", payment_method="transfer"
        )

        client = await client_service.get_by_national_id(session, national_id="30111222")
        assert client is not None
        assert rental.client_id == client.id
        assert client.total_reservations == 1
        assert client.total_spent == Decimal("6000")
        assert client.first_visit == date(2025, 12, 10)

        payments = await payment_service.list_by_rental(session, rental_id=rental.id)
        assert len(payments) == 1
        assert payments[0].amount == Decimal("2500")
        assert payments[0].notes == rental_service.INITIAL_PAYMENT_NOTE

        with pytest.raises(ValidationError):
            await _book(
                session,
                catalog,
                classification,
                unit_number=3,
                amount_paid=7000,
            )


async def test_fifth_booking_promotes_client_to_frequent(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        for unit in range(1, 5):
            await _book(
                session,
                catalog,
                classification,
                unit_number=unit,
                start_date=date(2025, 12, 10),
                end_date=date(2025, 12, 10),
            )
        client = await client_service.get_by_national_id(session, national_id="30111222")
        assert client.total_reservations == 4
        assert client.classification is ClientClassification.REGULAR

        fifth = await _book(
            session,
            catalog,
            classification,
            unit_number=5,
            start_date=date(2025, 12, 10),
            end_date=date(2025, 12, 10),
        )
        # priced before the promotion
        assert fifth.discount == Decimal("0")
        await session.refresh(client)
        assert client.total_reservations == 5
        assert client.classification is ClientClassification.FREQUENT

        sixth = await _book(
            session,
            catalog,
            classification,
            unit_number=6,
            start_date=date(2025, 12, 10),
            end_date=date(2025, 12, 10),
        )
        assert sixth.discount_percentage == Decimal("5")
        assert sixth.total_price == Decimal("950")


async def test_update_rental_reprices_and_keeps_dates(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rental = await _book(session, catalog, classification)

        updated = await rental_service.update_rental(
            session,
            classification=classification,
            rental_id=rental.id,
            price_per_day="1200",
            notes="  near the lifeguard  ",
        )
        assert updated.total_price == Decimal("7200")
        assert updated.notes == "near the lifeguard"
        assert updated.start_date == date(2025, 12, 10)

        with pytest.raises(ValidationError):
            await rental_service.update_rental(
                session,
                classification=classification,
                rental_id=rental.id,
                client_phone="12",
            )


async def test_move_rental_checks_target_unit(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        first = await _book(session, catalog, classification, unit_number=3)
        await _book(
            session,
            catalog,
            classification,
            unit_number=4,
            client_name="Martin Gomez",
            client_national_id="28444555",
            start_date=date(2025, 12, 14),
            end_date=date(2025, 12, 18),
        )

        with pytest.raises(ConflictError) as excinfo:
            await rental_service.move_rental(
                session, catalog=catalog, rental_id=first.id, new_unit_number=4
            )
        assert "S4" in str(excinfo.value)
        assert "Martin Gomez" in str(excinfo.value)

        with pytest.raises(ValidationError):
            await rental_service.move_rental(
                session, catalog=catalog, rental_id=first.id, new_unit_number=3
            )
        with pytest.raises(ValidationError):
            await rental_service.move_rental(
                session, catalog=catalog, rental_id=first.id, new_unit_number=51
            )

        moved = await rental_service.move_rental(
            session, catalog=catalog, rental_id=first.id, new_unit_number=5
        )
        assert moved.unit_number == 5
        assert await availability_service.is_available(
            session,
            resource_type=ResourceType.UMBRELLA,
            unit_number=3,
            start_date=date(2025, 12, 10),
            end_date=date(2025, 12, 15),
        )


async def test_cancel_is_a_tombstone_and_idempotent(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rental = await _book(session, catalog, classification)

        assert await rental_service.cancel_rental(
            session, classification=classification, rental_id=rental.id
        )
        assert await rental_service.cancel_rental(
            session, classification=classification, rental_id=rental.id
        )

        await session.refresh(rental)
        assert rental.status is RentalStatus.CANCELLED
        client = await client_service.get_client(session, client_id=rental.client_id)
        assert client.total_reservations == 0
        assert client.total_spent == Decimal("0")

        # the freed unit can be booked again
        again = await _book(session, catalog, classification)
        assert again.id != rental.id

        with pytest.raises(ValidationError):
            await payment_service.add_payment(
                session, rental_id=rental.id, amount=Decimal("100")
            )

        assert not await rental_service.cancel_rental(
            session, classification=classification, rental_id=uuid.uuid4()
        )


async def test_unit_status_relative_to_reference_date(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rental = await _book(session, catalog, classification, unit_number=2)
        await payment_service.add_payment(
            session, rental_id=rental.id, amount=Decimal("5950")
        )

        occupied = await rental_service.calculate_unit_status(
            session,
            resource_type=ResourceType.UMBRELLA,
            unit_number=2,
            reference_date=date(2025, 12, 12),
        )
        assert occupied.status == "occupied"
        assert occupied.payment_status == "paid"
        assert occupied.days_remaining == 4
        assert occupied.amount_due == Decimal("50")

        reserved = await rental_service.calculate_unit_status(
            session,
            resource_type=ResourceType.UMBRELLA,
            unit_number=2,
            reference_date=date(2025, 12, 5),
        )
        assert reserved.status == "reserved"
        assert reserved.days_until_check_in == 5

        far = await rental_service.calculate_unit_status(
            session,
            resource_type=ResourceType.UMBRELLA,
            unit_number=2,
            reference_date=date(2025, 12, 1),
        )
        assert far.status == "free"
        assert far.days_until_next_reservation == 9

        after = await rental_service.calculate_unit_status(
            session,
            resource_type=ResourceType.UMBRELLA,
            unit_number=2,
            reference_date=date(2025, 12, 16),
        )
        assert after.status == "free"
        assert after.rental_id is None


async def test_missing_rental_raises_not_found(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(NotFound):
            await rental_service.move_rental(
                session, catalog=catalog, rental_id=uuid.uuid4(), new_unit_number=2
            )


async def test_non_finite_amounts_are_validation_errors(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError) as excinfo:
            await _book(session, catalog, classification, price_per_day="NaN")
        assert "Price per day must be greater than 0" in excinfo.value.errors

        with pytest.raises(ValidationError) as excinfo:
            await _book(session, catalog, classification, price_per_day="Infinity")
        assert "Price per day must be greater than 0" in excinfo.value.errors

        with pytest.raises(ValidationError) as excinfo:
            await _book(session, catalog, classification, amount_paid="abc")
        assert excinfo.value.errors == ["Initial payment is not a valid amount"]

        rental = await _book(session, catalog, classification)
        with pytest.raises(ValidationError):
            await rental_service.update_rental(
                session,
                classification=classification,
                rental_id=rental.id,
                price_per_day="NaN",
            )


async def test_cancelled_rental_cannot_be_edited_or_moved(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rental = await _book(session, catalog, classification, unit_number=6)
        await rental_service.cancel_rental(
            session, classification=classification, rental_id=rental.id
        )

        with pytest.raises(ValidationError):
            await rental_service.update_rental(
                session,
                classification=classification,
                rental_id=rental.id,
                price_per_day="1500",
            )
        with pytest.raises(ValidationError):
            await rental_service.move_rental(
                session, catalog=catalog, rental_id=rental.id, new_unit_number=7
            )

        await session.refresh(rental)
        assert rental.unit_number == 6
        assert rental.total_price == Decimal("6000")


async def test_booking_with_parking_assigns_first_free_spot(
    reset_database, db_url: str, catalog, classification, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        session.add(
            rental_factory(
                resource_type=ResourceType.PARKING,
                unit_number=1,
                start_date=date(2025, 12, 12),
                end_date=date(2025, 12, 12),
                client_name="Martin Gomez",
            )
        )
        await session.commit()

        result = await rental_service.book_rental(
            session,
            catalog=catalog,
            classification=classification,
            include_parking=True,
            parking_price_per_day="500",
            parking_amount_paid="1000",
            resource_type="tent",
            unit_number=2,
            start_date=date(2025, 12, 10),
            end_date=date(2025, 12, 15),
            client_name="Lucia Fernandez",
            client_phone="2262123456",
            client_national_id="30111222",
            price_per_day=Decimal("2000"),
        )

        assert result.parking_error is None
        parking = result.parking
        assert parking.resource_type is ResourceType.PARKING
        assert parking.unit_number == 2
        assert (parking.start_date, parking.end_date) == (
            result.rental.start_date,
            result.rental.end_date,
        )
        assert parking.client_id == result.rental.client_id
        assert parking.total_price == Decimal("3000")
        assert await payment_service.paid_amount(
            session, rental_id=parking.id
        ) == Decimal("1000")

        client = await client_service.get_client(session, client_id=parking.client_id)
        assert client.total_reservations == 2
        assert client.total_spent == Decimal("15000")


async def test_booking_keeps_main_rental_when_no_parking_is_free(
    reset_database, db_url: str, catalog, classification, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        session.add_all(
            rental_factory(
                resource_type=ResourceType.PARKING,
                unit_number=unit,
                start_date=date(2025, 12, 1),
                end_date=date(2025, 12, 31),
            )
            for unit in range(1, 81)
        )
        await session.commit()

        result = await rental_service.book_rental(
            session,
            catalog=catalog,
            classification=classification,
            include_parking=True,
            parking_price_per_day="500",
            resource_type="umbrella",
            unit_number=1,
            start_date=date(2025, 12, 10),
            end_date=date(2025, 12, 15),
            client_name="Ana Ruiz",
            client_phone="1144445555",
            client_national_id="27333444",
            price_per_day=Decimal("1000"),
        )

        assert result.parking is None
        assert result.parking_error == "No parking spots are available for these dates"
        assert result.rental.status is RentalStatus.ACTIVE
        client = await client_service.get_client(session, client_id=result.rental.client_id)
        assert client.total_reservations == 1


async def test_parking_is_only_bundled_with_beach_units(
    reset_database, db_url: str, catalog, classification
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        result = await rental_service.book_rental(
            session,
            catalog=catalog,
            classification=classification,
            include_parking=True,
            parking_price_per_day="500",
            resource_type="parking",
            unit_number=10,
            start_date=date(2025, 12, 10),
            end_date=date(2025, 12, 11),
            client_name="Ana Ruiz",
            client_phone="1144445555",
            client_national_id="27333444",
            price_per_day=Decimal("800"),
        )
        assert result.parking is None
        assert result.parking_error is not None
