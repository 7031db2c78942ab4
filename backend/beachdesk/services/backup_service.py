"""Full ledger export and restore."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.errors import ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import (
    Client,
    EstablishmentConfig,
    Payment,
    PoolEntry,
    PriceRate,
    Rental,
    ResourceType,
)
from beachdesk.schemas import (
    ClassificationConfigSchema,
    ClientRead,
    PaymentRead,
    PoolEntryRead,
    PoolSettingsSchema,
    RentalRead,
)
from beachdesk.services import (
    client_service,
    establishment_service,
    payment_service,
    pool_service,
    reservation_service,
)

logger = logging.getLogger(__name__)

BUNDLE_VERSION = "3.0"

_RENTAL_DERIVED = {"days"}


def _config_section(config: EstablishmentConfig) -> dict[str, Any]:
    return {
        "name": config.name,
        "location": config.location,
        "season_start": config.season_start.isoformat(),
        "season_end": config.season_end.isoformat(),
        "special_window_start": (
            config.special_window_start.isoformat()
            if config.special_window_start
            else None
        ),
        "special_window_days": config.special_window_days,
        "special_window_label": config.special_window_label,
        "resources": dict(config.resources or {}),
        "classification": ClassificationConfigSchema.model_validate(
            establishment_service.classification_from_config(config)
        ).model_dump(mode="json"),
        "pool_settings": PoolSettingsSchema.model_validate(
            establishment_service.pool_settings_from_config(config)
        ).model_dump(mode="json"),
    }


async def export_bundle(session: AsyncSession) -> dict[str, Any]:
    """Snapshot every collection as JSON-compatible data."""
    config = await establishment_service.get_or_create_config(session)
    rentals = await reservation_service.list_rentals(session)
    payments = await payment_service.list_payments(session)
    clients = await client_service.list_clients(session)
    entries = await pool_service.list_entries(session)
    rates = (await session.execute(select(PriceRate))).scalars().all()

    pricing: dict[str, dict[str, str]] = {}
    for rate in rates:
        pricing.setdefault(rate.resource_type.value, {})[str(rate.period_id)] = str(
            rate.price_per_day
        )

    bundle = {
        "version": BUNDLE_VERSION,
        "exported_at": datetime.now(UTC).isoformat(),
        "config": _config_section(config),
        "rentals": [RentalRead.model_validate(r).model_dump(mode="json") for r in rentals],
        "payments": [
            PaymentRead.model_validate(p).model_dump(mode="json") for p in payments
        ],
        "clients": [ClientRead.model_validate(c).model_dump(mode="json") for c in clients],
        "pricing": pricing,
        "pool_entries": [
            PoolEntryRead.model_validate(e).model_dump(mode="json") for e in entries
        ],
    }
    logger.info(
        "Exported backup with %d rentals, %d payments, %d clients",
        len(rentals),
        len(payments),
        len(clients),
    )
    return bundle


def _parse(schema, items: Any, label: str, errors: list[str]) -> list:
    if items is None:
        return []
    if not isinstance(items, list):
        errors.append(f"'{label}' must be a list")
        return []
    parsed = []
    for index, item in enumerate(items):
        try:
            parsed.append(schema.model_validate(item))
        except SchemaValidationError as exc:
            errors.append(f"{label}[{index}]: {exc.errors()[0]['msg']}")
    return parsed


def _parse_day(value: Any, label: str, errors: list[str]) -> date | None:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        errors.append(f"config.{label}: invalid date {value!r}")
        return None


def _parse_config(config_data: Any, errors: list[str]) -> dict[str, Any]:
    """Turn the bundle's config section into column updates."""
    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        errors.append("'config' must be an object")
        return {}

    updates: dict[str, Any] = {}
    resources = config_data.get("resources")
    if resources:
        if not isinstance(resources, dict):
            errors.append("config.resources must be an object")
        else:
            parsed: dict[str, int] = {}
            for key, value in resources.items():
                try:
                    resource_type = ResourceType(key)
                except ValueError:
                    errors.append(f"config.resources: unknown resource type {key}")
                    continue
                try:
                    quantity = int(value)
                except (TypeError, ValueError):
                    errors.append(f"config.resources.{key}: invalid quantity")
                    continue
                if quantity < 0:
                    errors.append(f"config.resources.{key}: quantity cannot be negative")
                    continue
                parsed[resource_type.value] = quantity
            updates["resources"] = parsed

    for field_name in ("name", "location", "special_window_label"):
        value = config_data.get(field_name)
        if value is not None:
            if not isinstance(value, str):
                errors.append(f"config.{field_name} must be a string")
            else:
                updates[field_name] = value
    for field_name in ("season_start", "season_end"):
        if config_data.get(field_name):
            updates[field_name] = _parse_day(config_data[field_name], field_name, errors)
    if "special_window_start" in config_data:
        raw = config_data["special_window_start"]
        updates["special_window_start"] = (
            _parse_day(raw, "special_window_start", errors) if raw else None
        )
    if config_data.get("special_window_days") is not None:
        try:
            window_days = int(config_data["special_window_days"])
        except (TypeError, ValueError):
            errors.append("config.special_window_days: invalid number")
        else:
            if window_days < 1:
                errors.append("config.special_window_days must be at least 1")
            else:
                updates["special_window_days"] = window_days

    season_start = updates.get("season_start")
    season_end = updates.get("season_end")
    if season_start and season_end and season_start > season_end:
        errors.append("config: season start must be on or before season end")

    try:
        if config_data.get("classification"):
            updates.update(
                ClassificationConfigSchema.model_validate(
                    config_data["classification"]
                ).model_dump()
            )
        if config_data.get("pool_settings"):
            updates["pool_settings"] = PoolSettingsSchema.model_validate(
                config_data["pool_settings"]
            ).model_dump(mode="json")
    except SchemaValidationError as exc:
        errors.append(f"config: {exc.errors()[0]['msg']}")
    return updates


def _parse_pricing(pricing: Any, errors: list[str]) -> list[PriceRate]:
    if pricing is None:
        return []
    if not isinstance(pricing, dict):
        errors.append("'pricing' must be an object")
        return []
    rates: list[PriceRate] = []
    for type_key, table in pricing.items():
        try:
            resource_type = ResourceType(type_key)
        except ValueError:
            errors.append(f"pricing: unknown resource type {type_key}")
            continue
        if table is None:
            continue
        if not isinstance(table, dict):
            errors.append(f"pricing.{type_key} must be an object")
            continue
        for period_id, price in table.items():
            try:
                amount = Decimal(str(price))
                rate = PriceRate(
                    resource_type=resource_type,
                    period_id=int(period_id),
                    price_per_day=amount,
                )
            except (ArithmeticError, ValueError):
                errors.append(f"pricing.{type_key}.{period_id}: invalid price")
                continue
            if not amount.is_finite() or amount < 0:
                errors.append(f"pricing.{type_key}.{period_id}: invalid price")
                continue
            rates.append(rate)
    return rates


async def import_bundle(session: AsyncSession, *, bundle: dict[str, Any]) -> dict[str, int]:
    """Replace all collections with the bundle contents.

    The whole bundle is validated before anything is deleted; a bad bundle
    leaves the ledger untouched and raises ``ValidationError``.
    """
    if not isinstance(bundle, dict):
        raise ValidationError("Backup must be a JSON object")
    version = bundle.get("version")
    if version != BUNDLE_VERSION:
        raise ValidationError(f"Unsupported backup version: {version!r}")

    errors: list[str] = []
    rentals = _parse(RentalRead, bundle.get("rentals"), "rentals", errors)
    payments = _parse(PaymentRead, bundle.get("payments"), "payments", errors)
    clients = _parse(ClientRead, bundle.get("clients"), "clients", errors)
    entries = _parse(PoolEntryRead, bundle.get("pool_entries"), "pool_entries", errors)
    rates = _parse_pricing(bundle.get("pricing"), errors)
    config_updates = _parse_config(bundle.get("config"), errors)
    if errors:
        logger.warning("Backup rejected: %s", errors)
        raise ValidationError(errors)

    config = await establishment_service.get_or_create_config(session)
    for model in (Payment, Rental, PriceRate, PoolEntry, Client):
        await session.execute(delete(model))

    session.add_all(Client(**item.model_dump()) for item in clients)
    session.add_all(
        Rental(**item.model_dump(exclude=_RENTAL_DERIVED)) for item in rentals
    )
    session.add_all(Payment(**item.model_dump()) for item in payments)
    session.add_all(rates)
    session.add_all(
        PoolEntry(
            **item.model_dump(exclude={"dates"}),
            dates=[day.isoformat() for day in item.dates],
        )
        for item in entries
    )
    for field_name, value in config_updates.items():
        setattr(config, field_name, value)

    await commit_or_raise(session)
    counts = {
        "rentals": len(rentals),
        "payments": len(payments),
        "clients": len(clients),
        "pricing": len(rates),
        "pool_entries": len(entries),
    }
    logger.warning("Backup restored, existing data replaced: %s", counts)
    return counts
