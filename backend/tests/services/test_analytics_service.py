"""Tests for dashboard metrics."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from beachdesk.db.session import get_sessionmaker
from beachdesk.models import RentalStatus, ResourceType
from beachdesk.services import analytics_service, payment_service

pytestmark = pytest.mark.asyncio

TODAY = date(2026, 1, 10)


async def _seed(session, rental_factory):
    umbrella = rental_factory(
        unit_number=1, start_date=date(2026, 1, 8), end_date=date(2026, 1, 12)
    )
    tent = rental_factory(
        resource_type=ResourceType.TENT,
        unit_number=1,
        start_date=TODAY,
        end_date=TODAY,
        price_per_day=Decimal("2000"),
    )
    upcoming = rental_factory(
        unit_number=2, start_date=date(2026, 1, 12), end_date=date(2026, 1, 14)
    )
    cancelled = rental_factory(unit_number=3, start_date=TODAY, end_date=TODAY)
    cancelled.status = RentalStatus.CANCELLED
    session.add_all([umbrella, tent, upcoming, cancelled])
    await session.commit()

    await payment_service.add_payment(session, rental_id=umbrella.id, amount=Decimal("3000"))
    await payment_service.add_payment(session, rental_id=tent.id, amount=Decimal("2000"))
    return umbrella, tent, upcoming


async def test_occupancy_ignores_cancelled_rentals(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await _seed(session, rental_factory)

        point = await analytics_service.occupancy_on(session, catalog=catalog, day=TODAY)
        assert point.occupied == 2
        assert point.total == 160
        assert point.percentage == 1
        assert point.by_type["umbrella"] == {"occupied": 1, "total": 50, "percentage": 2}
        assert point.by_type["tent"]["percentage"] == 3
        assert "pool" not in point.by_type

        window = await analytics_service.occupancy_window(
            session, catalog=catalog, reference_date=TODAY, days_before=2, days_after=2
        )
        assert [p.day for p in window][0] == date(2026, 1, 8)
        assert len(window) == 5


async def test_revenue_and_pending_totals(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await _seed(session, rental_factory)

        assert await analytics_service.revenue_month(
            session, catalog=catalog, reference_date=TODAY
        ) == Decimal("5000")
        assert await analytics_service.revenue_month(
            session, catalog=catalog, reference_date=date(2025, 12, 20)
        ) == Decimal("0")
        assert await analytics_service.revenue_season(
            session, catalog=catalog
        ) == Decimal("5000")

        total, count = await analytics_service.pending_totals(session, catalog=catalog)
        assert total == Decimal("5000")
        assert count == 2


async def test_check_in_and_check_out_lists(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        umbrella, tent, upcoming = await _seed(session, rental_factory)

        assert [r.id for r in await analytics_service.check_ins_on(
            session, catalog=catalog, day=TODAY
        )] == [tent.id]
        assert [r.id for r in await analytics_service.check_outs_on(
            session, catalog=catalog, day=TODAY
        )] == [tent.id]
        assert [r.id for r in await analytics_service.upcoming_check_ins(
            session, catalog=catalog, reference_date=TODAY
        )] == [upcoming.id]
        assert [r.id for r in await analytics_service.upcoming_check_outs(
            session, catalog=catalog, reference_date=TODAY
        )] == [tent.id, umbrella.id, upcoming.id]


async def test_dashboard_collects_every_metric(
    reset_database, db_url: str, catalog, rental_factory
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        umbrella, tent, _ = await _seed(session, rental_factory)

        top = await analytics_service.top_resources(session, catalog=catalog, limit=2)
        assert [(item.label, item.total_income) for item in top] == [
            ("S1", Decimal("3000")),
            ("C1", Decimal("2000")),
        ]

        metrics = await analytics_service.dashboard_metrics(
            session, catalog=catalog, reference_date=TODAY
        )
        assert metrics["revenue"]["month"] == Decimal("5000")
        assert metrics["payments"] == {
            "pending_total": Decimal("5000"),
            "pending_count": 2,
        }
        assert metrics["occupancy"]["today"].occupied == 2
        assert len(metrics["occupancy_window"]) == 15
        assert [r.id for r in metrics["rentals"]["check_ins_today"]] == [tent.id]
        assert metrics["top_resources"][0].unit_number == umbrella.unit_number
