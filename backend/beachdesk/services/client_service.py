"""Client store and loyalty classification."""
from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.core.catalog import ClassificationConfig
from beachdesk.core.errors import NotFound, ValidationError
from beachdesk.db.session import commit_or_raise
from beachdesk.models import Client, ClientClassification, Rental, RentalStatus

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def digits_only(value: Any) -> str:
    return _NON_DIGITS.sub("", str(value or ""))


def classify(
    total_reservations: int,
    total_spent: Decimal,
    is_blacklisted: bool,
    config: ClassificationConfig,
) -> ClientClassification:
    """Tier for the given history. Blacklisted clients stay blacklisted."""
    if is_blacklisted:
        return ClientClassification.BLACKLIST
    if (
        total_reservations >= config.vip_min_reservations
        or Decimal(total_spent) >= config.vip_min_spending
    ):
        return ClientClassification.VIP
    if total_reservations >= config.frequent_min_reservations:
        return ClientClassification.FREQUENT
    return ClientClassification.REGULAR


def discount_percentage(
    classification: ClientClassification | None, config: ClassificationConfig
) -> Decimal:
    if classification is ClientClassification.VIP:
        return Decimal(config.vip_discount)
    if classification is ClientClassification.FREQUENT:
        return Decimal(config.frequent_discount)
    return Decimal("0")


async def get_client(session: AsyncSession, *, client_id: uuid.UUID) -> Client | None:
    return await session.get(Client, client_id)


async def get_by_national_id(session: AsyncSession, *, national_id: str) -> Client | None:
    normalized = digits_only(national_id)
    if not normalized:
        return None
    result = await session.execute(select(Client).where(Client.national_id == normalized))
    return result.scalar_one_or_none()


async def save_client(
    session: AsyncSession,
    *,
    client_id: uuid.UUID | None = None,
    full_name: str | None = None,
    national_id: str | None = None,
    phone: str | None = None,
    email: str | None = None,
    origin: dict[str, Any] | None = None,
    notes: str | None = None,
) -> Client:
    """Create a client, or update the one identified by ``client_id``."""
    client = None
    if client_id is not None:
        client = await session.get(Client, client_id)
        if client is None:
            raise NotFound("Client", client_id)

    name = (full_name or "").strip() if full_name is not None else None
    normalized_id = digits_only(national_id) if national_id is not None else None

    errors: list[str] = []
    if client is None or name is not None:
        if not name:
            errors.append("Full name is required")
    if client is None or normalized_id is not None:
        if not normalized_id:
            errors.append("National id is required")
    if normalized_id:
        duplicate = await get_by_national_id(session, national_id=normalized_id)
        if duplicate is not None and (client is None or duplicate.id != client.id):
            errors.append(f"A client with national id {normalized_id} already exists")
    if errors:
        raise ValidationError(errors)

    if client is None:
        client = Client(
            full_name=name,
            national_id=normalized_id,
            phone=digits_only(phone),
            email=(email or "").strip(),
            origin=origin or {},
            notes=notes or "",
        )
        session.add(client)
        await commit_or_raise(session)
        await session.refresh(client)
        logger.info("Client %s created", client.id)
        return client

    if name is not None:
        client.full_name = name
    if normalized_id is not None:
        client.national_id = normalized_id
    if phone is not None:
        client.phone = digits_only(phone)
    if email is not None:
        client.email = email.strip()
    if origin is not None:
        client.origin = origin
    if notes is not None:
        client.notes = notes
    await commit_or_raise(session)
    await session.refresh(client)
    logger.info("Client %s updated", client.id)
    return client


async def delete_client(session: AsyncSession, *, client_id: uuid.UUID) -> bool:
    """Remove a client. Rentals keep their denormalized client data."""
    client = await session.get(Client, client_id)
    if client is None:
        return False
    await session.delete(client)
    await commit_or_raise(session)
    logger.info("Client %s deleted", client_id)
    return True


async def list_clients(session: AsyncSession) -> Sequence[Client]:
    result = await session.execute(select(Client).order_by(Client.full_name))
    return result.scalars().all()


async def search_clients(session: AsyncSession, *, query: str) -> Sequence[Client]:
    """Case-insensitive match on name, national id or phone."""
    term = (query or "").strip().lower()
    if not term:
        return await list_clients(session)
    pattern = f"%{term}%"
    result = await session.execute(
        select(Client)
        .where(
            or_(
                func.lower(Client.full_name).like(pattern),
                Client.national_id.like(pattern),
                Client.phone.like(pattern),
            )
        )
        .order_by(Client.full_name)
    )
    return result.scalars().all()


async def list_by_classification(
    session: AsyncSession, *, classification: ClientClassification
) -> Sequence[Client]:
    result = await session.execute(
        select(Client)
        .where(Client.classification == classification)
        .order_by(Client.full_name)
    )
    return result.scalars().all()


async def update_stats(
    session: AsyncSession,
    *,
    client_id: uuid.UUID,
    amount: Decimal,
    reservation_date: date,
    config: ClassificationConfig,
) -> Client:
    """Count one more reservation for the client and re-evaluate its tier."""
    client = await session.get(Client, client_id)
    if client is None:
        raise NotFound("Client", client_id)
    client.total_reservations += 1
    client.total_spent = Decimal(client.total_spent) + Decimal(amount)
    client.last_visit = reservation_date
    if client.first_visit is None:
        client.first_visit = reservation_date
    previous = client.classification
    client.classification = classify(
        client.total_reservations, client.total_spent, client.is_blacklisted, config
    )
    await commit_or_raise(session)
    await session.refresh(client)
    if client.classification is not previous:
        logger.info(
            "Client %s reclassified %s -> %s",
            client.id,
            previous.value,
            client.classification.value,
        )
    return client


async def recompute_stats(
    session: AsyncSession, *, client_id: uuid.UUID, config: ClassificationConfig
) -> Client | None:
    """Rebuild counters from the client's non-cancelled rentals."""
    client = await session.get(Client, client_id)
    if client is None:
        return None
    result = await session.execute(
        select(Rental)
        .where(Rental.client_id == client_id, Rental.status != RentalStatus.CANCELLED)
        .order_by(Rental.start_date)
    )
    rentals = result.scalars().all()
    client.total_reservations = len(rentals)
    client.total_spent = sum((Decimal(r.total_price) for r in rentals), Decimal("0"))
    client.first_visit = rentals[0].start_date if rentals else None
    client.last_visit = max((r.start_date for r in rentals), default=None)
    client.classification = classify(
        client.total_reservations, client.total_spent, client.is_blacklisted, config
    )
    await commit_or_raise(session)
    await session.refresh(client)
    return client


async def reclassify_all(session: AsyncSession, *, config: ClassificationConfig) -> int:
    """Re-evaluate every non-blacklisted client. Returns how many changed."""
    result = await session.execute(
        select(Client).where(Client.classification != ClientClassification.BLACKLIST)
    )
    changed = 0
    for client in result.scalars():
        tier = classify(client.total_reservations, client.total_spent, False, config)
        if tier is not client.classification:
            client.classification = tier
            changed += 1
    await commit_or_raise(session)
    if changed:
        logger.info("Reclassified %d clients", changed)
    return changed


async def mark_blacklist(
    session: AsyncSession, *, client_id: uuid.UUID, reason: str
) -> Client:
    client = await session.get(Client, client_id)
    if client is None:
        raise NotFound("Client", client_id)
    client.classification = ClientClassification.BLACKLIST
    client.blacklist_reason = (reason or "").strip()
    await commit_or_raise(session)
    await session.refresh(client)
    logger.warning("Client %s blacklisted", client_id)
    return client


async def remove_from_blacklist(
    session: AsyncSession, *, client_id: uuid.UUID, config: ClassificationConfig
) -> Client:
    client = await session.get(Client, client_id)
    if client is None:
        raise NotFound("Client", client_id)
    client.blacklist_reason = ""
    client.classification = classify(
        client.total_reservations, client.total_spent, False, config
    )
    await commit_or_raise(session)
    await session.refresh(client)
    logger.info("Client %s removed from blacklist", client_id)
    return client


async def client_stats(session: AsyncSession) -> dict[str, int]:
    result = await session.execute(
        select(Client.classification, func.count(Client.id)).group_by(
            Client.classification
        )
    )
    counts = {tier.value: 0 for tier in ClientClassification}
    for tier, count in result.all():
        counts[tier.value] = count
    return {"total": sum(counts.values()), **counts}
