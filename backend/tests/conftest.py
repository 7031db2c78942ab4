"""Test fixtures for the beach desk backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from beachdesk.core.catalog import (
    DEFAULT_QUANTITIES,
    ClassificationConfig,
    PoolSettings,
    ResourceCatalog,
    Season,
    SpecialWindow,
    build_catalog,
)
from beachdesk.core.config import get_settings
from beachdesk.db.base import Base
from beachdesk.db.session import dispose_engine, get_sessionmaker
from beachdesk.main import app
from beachdesk.models import PaymentMethod, Rental, RentalStatus, ResourceType

SEASON = Season(start_date=date(2025, 12, 1), end_date=date(2026, 2, 28))
CARNIVAL = SpecialWindow(start_date=date(2026, 2, 14), days=4, label="Carnaval")


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest.fixture()
def catalog() -> ResourceCatalog:
    return build_catalog(
        season=SEASON, special_window=CARNIVAL, quantities=DEFAULT_QUANTITIES
    )


@pytest.fixture()
def classification() -> ClassificationConfig:
    return ClassificationConfig()


@pytest.fixture()
def pool_settings() -> PoolSettings:
    return PoolSettings()


@pytest_asyncio.fixture()
async def app_context(reset_database: None) -> AsyncIterator[dict[str, Any]]:
    """Yield an async client bound to a freshly created schema."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield {"client": client}


def make_rental(
    *,
    unit_number: int,
    start_date: date,
    end_date: date,
    resource_type: ResourceType = ResourceType.UMBRELLA,
    price_per_day: Decimal = Decimal("1000"),
    client_name: str = "Lucia Fernandez",
) -> Rental:
    """Build a stored-shape rental without going through the booking rules."""
    days = (end_date - start_date).days + 1
    total = price_per_day * days
    return Rental(
        resource_type=resource_type,
        unit_number=unit_number,
        start_date=start_date,
        end_date=end_date,
        client_name=client_name,
        client_phone="2262123456",
        client_national_id="30111222",
        price_per_day=price_per_day,
        base_price=total,
        discount=Decimal("0"),
        discount_percentage=Decimal("0"),
        total_price=total,
        payment_method=PaymentMethod.CASH,
        status=RentalStatus.ACTIVE,
    )


@pytest.fixture()
def rental_factory():
    return make_rental
