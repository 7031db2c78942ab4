"""Pydantic schemas for clients."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from beachdesk.models.client import ClientClassification


class ClientBase(BaseModel):
    full_name: str
    national_id: str
    phone: str = ""
    email: str = ""
    origin: dict[str, Any] = Field(default_factory=dict)
    notes: str = ""


class ClientCreate(ClientBase):
    """Payload for registering a client."""


class ClientUpdate(BaseModel):
    full_name: str | None = None
    national_id: str | None = None
    phone: str | None = None
    email: str | None = None
    origin: dict[str, Any] | None = None
    notes: str | None = None


class ClientRead(ClientBase):
    id: uuid.UUID
    classification: ClientClassification
    total_reservations: int
    total_spent: Decimal
    first_visit: date | None = None
    last_visit: date | None = None
    blacklist_reason: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BlacklistRequest(BaseModel):
    reason: str = Field(min_length=1)


class ClientStatsRead(BaseModel):
    total: int
    regular: int
    frequent: int
    vip: int
    blacklist: int
