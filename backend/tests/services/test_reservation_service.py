"""Tests for rental record listing and search."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from beachdesk.core.errors import ValidationError
from beachdesk.db.session import get_sessionmaker
from beachdesk.models import RentalStatus, ResourceType
from beachdesk.services import payment_service, reservation_service

pytestmark = pytest.mark.asyncio

TODAY = date(2026, 1, 10)


async def _seed(session, rental_factory):
    rentals = {
        "jose": rental_factory(
            unit_number=12,
            start_date=date(2026, 1, 5),
            end_date=date(2026, 1, 15),
            client_name="José Pérez",
        ),
        "josefina": rental_factory(
            resource_type=ResourceType.TENT,
            unit_number=3,
            start_date=date(2025, 12, 1),
            end_date=date(2025, 12, 5),
            client_name="Josefina Ruiz",
        ),
        "martin": rental_factory(
            resource_type=ResourceType.PARKING,
            unit_number=40,
            start_date=date(2026, 1, 20),
            end_date=date(2026, 1, 22),
            client_name="Martin Gomez",
        ),
    }
    rentals["martin"].client_national_id = "28444555"
    rentals["martin"].client_phone = "2235556666"
    for rental in rentals.values():
        await reservation_service.create_rental_record(session, rental=rental)
    return rentals


async def test_search_matches_names_without_accents_and_ranks_exact_first(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rentals = await _seed(session, rental_factory)

        results = await reservation_service.search_rentals(
            session, catalog=catalog, query="jose", today=TODAY
        )
        assert [r.id for r in results] == [rentals["jose"].id, rentals["josefina"].id]

        exact = await reservation_service.search_rentals(
            session, catalog=catalog, query="Jose Perez", today=TODAY
        )
        assert [r.id for r in exact] == [rentals["jose"].id]


async def test_search_matches_unit_reference_id_and_contact(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rentals = await _seed(session, rental_factory)

        by_unit = await reservation_service.search_rentals(
            session, catalog=catalog, query="S12", today=TODAY
        )
        assert [r.id for r in by_unit] == [rentals["jose"].id]

        by_id = await reservation_service.search_rentals(
            session, catalog=catalog, query=str(rentals["martin"].id)[:8], today=TODAY
        )
        assert rentals["martin"].id in [r.id for r in by_id]

        by_national_id = await reservation_service.search_rentals(
            session, catalog=catalog, query="28444555", today=TODAY
        )
        assert [r.id for r in by_national_id] == [rentals["martin"].id]

        by_phone = await reservation_service.search_rentals(
            session, catalog=catalog, query="5556666", today=TODAY
        )
        assert [r.id for r in by_phone] == [rentals["martin"].id]

        assert (
            await reservation_service.search_rentals(
                session, catalog=catalog, query="j", today=TODAY
            )
            == []
        )


async def test_search_filters(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rentals = await _seed(session, rental_factory)
        jose = rentals["jose"]
        await payment_service.add_payment(
            session, rental_id=jose.id, amount=Decimal("500")
        )
        await payment_service.add_payment(
            session,
            rental_id=rentals["josefina"].id,
            amount=Decimal(rentals["josefina"].total_price),
        )

        async def search(**filters):
            found = await reservation_service.search_rentals(
                session, catalog=catalog, query="jose", today=TODAY, **filters
            )
            return [r.id for r in found]

        assert await search(payment_status="partial") == [jose.id]
        assert await search(payment_status="paid") == [rentals["josefina"].id]
        assert await search(payment_status="pending") == []
        assert await search(resource_type="tent") == [rentals["josefina"].id]
        assert await search(status="active") == [jose.id]
        assert await search(status="finished") == [rentals["josefina"].id]
        assert await search(start_date=date(2026, 1, 15)) == [jose.id]
        assert await search(end_date=date(2025, 12, 1)) == [rentals["josefina"].id]

        with pytest.raises(ValidationError):
            await search(payment_status="overdue")
        with pytest.raises(ValidationError):
            await search(resource_type="jetski")


async def test_search_skips_cancelled_rentals_by_default(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        rentals = await _seed(session, rental_factory)
        jose = rentals["jose"]
        jose.status = RentalStatus.CANCELLED
        await reservation_service.update_rental_record(
            session, rental_id=jose.id, rental=jose
        )

        found = await reservation_service.search_rentals(
            session, catalog=catalog, query="perez", today=TODAY
        )
        assert found == []
        found = await reservation_service.search_rentals(
            session, catalog=catalog, query="perez", today=TODAY, include_cancelled=True
        )
        assert [r.id for r in found] == [jose.id]
