"""Establishment configuration: catalog, classification thresholds, pool prices."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

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
from beachdesk.core.errors import ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import (
    ESTABLISHMENT_ID,
    EstablishmentConfig,
    Payment,
    PoolEntry,
    PriceRate,
    Rental,
    ResourceType,
)
from beachdesk.services import client_service

logger = logging.getLogger(__name__)


def _default_pool_settings() -> dict[str, Any]:
    defaults = PoolSettings()
    return {
        "adult_day_pass": str(defaults.adult_day_pass),
        "adult_stay_per_day": str(defaults.adult_stay_per_day),
        "child_day_pass": str(defaults.child_day_pass),
        "child_stay_per_day": str(defaults.child_stay_per_day),
        "age_limit": defaults.age_limit,
        "group_discounts": {
            str(size): str(rate) for size, rate in defaults.group_discounts.items()
        },
    }


async def get_or_create_config(session: AsyncSession) -> EstablishmentConfig:
    """Return the configuration record, seeding defaults on first use."""
    config = await session.get(EstablishmentConfig, ESTABLISHMENT_ID)
    if config is not None:
        return config

    settings = get_settings()
    config = EstablishmentConfig(
        id=ESTABLISHMENT_ID,
        name=settings.establishment_name,
        location=settings.establishment_location,
        season_start=settings.season_start,
        season_end=settings.season_end,
        special_window_start=settings.special_window_start,
        special_window_days=settings.special_window_days,
        special_window_label=settings.special_window_label,
        resources={rt.value: qty for rt, qty in DEFAULT_QUANTITIES.items()},
        pool_settings=_default_pool_settings(),
    )
    session.add(config)
    await commit_or_raise(session)
    await session.refresh(config)
    logger.info("Created default establishment configuration for %s", config.name)
    return config


def catalog_from_config(config: EstablishmentConfig) -> ResourceCatalog:
    season = Season(start_date=config.season_start, end_date=config.season_end)
    window = None
    if config.special_window_start is not None and config.special_window_days > 0:
        window = SpecialWindow(
            start_date=config.special_window_start,
            days=config.special_window_days,
            label=config.special_window_label,
        )
    return build_catalog(
        season=season, special_window=window, quantities=config.resources or {}
    )


def classification_from_config(config: EstablishmentConfig) -> ClassificationConfig:
    return ClassificationConfig(
        frequent_min_reservations=config.frequent_min_reservations,
        frequent_discount=Decimal(config.frequent_discount),
        vip_min_reservations=config.vip_min_reservations,
        vip_min_spending=Decimal(config.vip_min_spending),
        vip_discount=Decimal(config.vip_discount),
    )


def pool_settings_from_config(config: EstablishmentConfig) -> PoolSettings:
    raw = config.pool_settings or {}
    defaults = PoolSettings()
    discounts = raw.get("group_discounts")
    return PoolSettings(
        adult_day_pass=Decimal(str(raw.get("adult_day_pass", defaults.adult_day_pass))),
        adult_stay_per_day=Decimal(
            str(raw.get("adult_stay_per_day", defaults.adult_stay_per_day))
        ),
        child_day_pass=Decimal(str(raw.get("child_day_pass", defaults.child_day_pass))),
        child_stay_per_day=Decimal(
            str(raw.get("child_stay_per_day", defaults.child_stay_per_day))
        ),
        age_limit=int(raw.get("age_limit", defaults.age_limit)),
        group_discounts=(
            {int(size): Decimal(str(rate)) for size, rate in discounts.items()}
            if discounts
            else defaults.group_discounts
        ),
    )


async def load_catalog(session: AsyncSession) -> ResourceCatalog:
    """Build the immutable resource catalog from the persisted configuration."""
    return catalog_from_config(await get_or_create_config(session))


async def load_classification_config(session: AsyncSession) -> ClassificationConfig:
    return classification_from_config(await get_or_create_config(session))


async def load_pool_settings(session: AsyncSession) -> PoolSettings:
    return pool_settings_from_config(await get_or_create_config(session))


def _validate_classification(config: ClassificationConfig) -> None:
    errors: list[str] = []
    if config.frequent_min_reservations < 1:
        errors.append("Frequent minimum reservations must be at least 1")
    if config.vip_min_reservations <= config.frequent_min_reservations:
        errors.append(
            "VIP minimum reservations must be greater than the frequent minimum"
        )
    if config.vip_min_spending < 0:
        errors.append("VIP minimum spending cannot be negative")
    for label, value in (
        ("Frequent discount", config.frequent_discount),
        ("VIP discount", config.vip_discount),
    ):
        if not Decimal("0") <= Decimal(value) <= Decimal("100"):
            errors.append(f"{label} must be between 0 and 100")
    if errors:
        raise ValidationError(errors)


async def save_classification_config(
    session: AsyncSession, *, classification: ClassificationConfig
) -> ClassificationConfig:
    """Persist new thresholds and reclassify every non-blacklisted client."""
    _validate_classification(classification)
    config = await get_or_create_config(session)
    config.frequent_min_reservations = classification.frequent_min_reservations
    config.frequent_discount = classification.frequent_discount
    config.vip_min_reservations = classification.vip_min_reservations
    config.vip_min_spending = classification.vip_min_spending
    config.vip_discount = classification.vip_discount
    await commit_or_raise(session)
    logger.info("Client classification thresholds updated")
    await client_service.reclassify_all(session, config=classification)
    return classification


async def save_pool_settings(
    session: AsyncSession, *, pool_settings: PoolSettings
) -> PoolSettings:
    errors: list[str] = []
    for name in (
        "adult_day_pass",
        "adult_stay_per_day",
        "child_day_pass",
        "child_stay_per_day",
    ):
        if getattr(pool_settings, name) < 0:
            errors.append(f"{name.replace('_', ' ').capitalize()} cannot be negative")
    if any(not 0 <= rate < 1 for rate in pool_settings.group_discounts.values()):
        errors.append("Group discounts must be fractions between 0 and 1")
    if errors:
        raise ValidationError(errors)

    config = await get_or_create_config(session)
    config.pool_settings = {
        "adult_day_pass": str(pool_settings.adult_day_pass),
        "adult_stay_per_day": str(pool_settings.adult_stay_per_day),
        "child_day_pass": str(pool_settings.child_day_pass),
        "child_stay_per_day": str(pool_settings.child_stay_per_day),
        "age_limit": pool_settings.age_limit,
        "group_discounts": {
            str(size): str(rate) for size, rate in pool_settings.group_discounts.items()
        },
    }
    await commit_or_raise(session)
    return pool_settings


async def reconfigure_resources(
    session: AsyncSession,
    *,
    quantities: Mapping[ResourceType | str, int],
    season_start: date | None = None,
    season_end: date | None = None,
    special_window_start: date | None = None,
    special_window_days: int | None = None,
    special_window_label: str | None = None,
    name: str | None = None,
    location: str | None = None,
) -> ResourceCatalog:
    """Replace resources (and optionally the season), wiping dependent data.

    Rentals, payments, price tables and pool entries are removed because unit
    numbers and period ids no longer line up with the new configuration.
    Clients are kept.
    """
    errors: list[str] = []
    normalized: dict[str, int] = {}
    for key, value in quantities.items():
        try:
            resource_type = ResourceType(key)
        except ValueError:
            errors.append(f"Unknown resource type: {key}")
            continue
        if int(value) < 0:
            errors.append(f"Quantity for {resource_type.value} cannot be negative")
            continue
        normalized[resource_type.value] = int(value)
    if not any(
        qty > 0 for rt, qty in normalized.items() if rt != ResourceType.POOL.value
    ):
        errors.append("At least one unit-based resource type must be configured")

    config = await get_or_create_config(session)
    new_start = season_start or config.season_start
    new_end = season_end or config.season_end
    if new_start > new_end:
        errors.append("Season start must be on or before season end")
    if special_window_days is not None and special_window_days < 0:
        errors.append("Special window length cannot be negative")
    if errors:
        raise ValidationError(errors)

    await session.execute(delete(Payment))
    await session.execute(delete(Rental))
    await session.execute(delete(PriceRate))
    await session.execute(delete(PoolEntry))

    config.resources = normalized
    config.season_start = new_start
    config.season_end = new_end
    if special_window_start is not None:
        config.special_window_start = special_window_start
    if special_window_days is not None:
        config.special_window_days = special_window_days
    if special_window_label is not None:
        config.special_window_label = special_window_label
    if name is not None:
        config.name = name
    if location is not None:
        config.location = location
    await commit_or_raise(session)
    await session.refresh(config)
    logger.warning(
        "Establishment reconfigured (%s); rentals, payments, pricing and pool entries wiped",
        normalized,
    )
    return catalog_from_config(config)
