"""Tests for the per-period price tables."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from beachdesk.core.errors import ValidationError
from beachdesk.db.session import get_sessionmaker
from beachdesk.services import pricing_service

pytestmark = pytest.mark.asyncio


async def test_unset_price_differs_from_zero(reset_database, db_url: str, catalog) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await pricing_service.set_pricing(
            session,
            catalog=catalog,
            resource_type="umbrella",
            prices={1: Decimal("1000"), 2: Decimal("0"), 3: None},
        )

        table = await pricing_service.get_pricing(
            session, catalog=catalog, resource_type="umbrella"
        )
        assert table == {1: Decimal("1000"), 2: Decimal("0")}

        assert await pricing_service.get_price(
            session, catalog=catalog, resource_type="umbrella", day=date(2025, 12, 5)
        ) == Decimal("1000")
        assert await pricing_service.get_price(
            session, catalog=catalog, resource_type="umbrella", day=date(2025, 12, 20)
        ) == Decimal("0")
        assert (
            await pricing_service.get_price(
                session, catalog=catalog, resource_type="umbrella", day=date(2026, 1, 2)
            )
            is None
        )
        assert (
            await pricing_service.get_price(
                session, catalog=catalog, resource_type="umbrella", day=date(2026, 3, 5)
            )
            is None
        )


async def test_set_pricing_replaces_whole_table(reset_database, db_url: str, catalog) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await pricing_service.set_pricing(
            session, catalog=catalog, resource_type="tent", prices={1: 5000, 2: 5500}
        )
        await pricing_service.set_pricing(
            session, catalog=catalog, resource_type="tent", prices={"3": "6000"}
        )

        table = await pricing_service.get_pricing(
            session, catalog=catalog, resource_type="tent"
        )
        assert table == {3: Decimal("6000")}
        assert await pricing_service.get_pricing(
            session, catalog=catalog, resource_type="tent"
        ) == table


async def test_set_pricing_rejects_bad_rows_without_writing(
    reset_database, db_url: str, catalog
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await pricing_service.set_pricing(
            session, catalog=catalog, resource_type="umbrella", prices={1: 1000}
        )
        with pytest.raises(ValidationError) as excinfo:
            await pricing_service.set_pricing(
                session,
                catalog=catalog,
                resource_type="umbrella",
                prices={1: -5, 99: 1000},
            )
        assert len(excinfo.value.errors) == 2

        table = await pricing_service.get_pricing(
            session, catalog=catalog, resource_type="umbrella"
        )
        assert table == {1: Decimal("1000")}

        with pytest.raises(ValidationError):
            await pricing_service.get_pricing(
                session, catalog=catalog, resource_type="jetski"
            )


async def test_suggest_price_averages_over_priced_days(
    reset_database, db_url: str, catalog
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await pricing_service.set_pricing(
            session,
            catalog=catalog,
            resource_type="umbrella",
            prices={1: 1000, 2: 1500},
        )

        # 12-14 and 12-15 in period 1, 12-16 in period 2
        suggestion = await pricing_service.suggest_price_for_range(
            session,
            catalog=catalog,
            resource_type="umbrella",
            start_date=date(2025, 12, 14),
            end_date=date(2025, 12, 16),
        )
        assert suggestion == Decimal("1167")

        assert (
            await pricing_service.suggest_price_for_range(
                session,
                catalog=catalog,
                resource_type="umbrella",
                start_date=date(2026, 1, 2),
                end_date=date(2026, 1, 4),
            )
            is None
        )


async def test_check_complete_lists_missing_periods(
    reset_database, db_url: str, catalog
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await pricing_service.set_pricing(
            session,
            catalog=catalog,
            resource_type="parking",
            prices={1: 800, 2: 800, 3: 900, 4: 900, 5: 900, 6: 0},
        )
        report = await pricing_service.check_complete(
            session, catalog=catalog, resource_type="parking"
        )
        assert not report.complete
        assert [p.id for p in report.missing_periods] == [6, 7]

        await pricing_service.set_pricing(
            session,
            catalog=catalog,
            resource_type="parking",
            prices={pid: 800 for pid in range(1, 8)},
        )
        report = await pricing_service.check_complete(
            session, catalog=catalog, resource_type="parking"
        )
        assert report.complete
        assert report.missing_periods == []


@pytest.mark.parametrize("price", ["NaN", "Infinity", "cheap"])
async def test_set_pricing_rejects_non_numeric_prices(
    reset_database, db_url: str, catalog, price
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError) as excinfo:
            await pricing_service.set_pricing(
                session, catalog=catalog, resource_type="umbrella", prices={1: price}
            )
        assert excinfo.value.errors == ["Invalid price for period 1"]
        assert await pricing_service.get_pricing(
            session, catalog=catalog, resource_type="umbrella"
        ) == {}


async def test_repeated_price_reads_agree(reset_database, db_url: str, catalog) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await pricing_service.set_pricing(
            session, catalog=catalog, resource_type="tent", prices={2: Decimal("3500")}
        )
        days = [date(2025, 12, 1), date(2025, 12, 20), date(2026, 3, 1)]
        first = [
            await pricing_service.get_price(
                session, catalog=catalog, resource_type="tent", day=day
            )
            for day in days
        ]
        second = [
            await pricing_service.get_price(
                session, catalog=catalog, resource_type="tent", day=day
            )
            for day in days
        ]
        assert first == second == [None, Decimal("3500"), None]
