"""ORM models package export."""

from beachdesk.models.client import Client, ClientClassification
from beachdesk.models.establishment import ESTABLISHMENT_ID, EstablishmentConfig
from beachdesk.models.payment import Payment
from beachdesk.models.pool import PoolEntry, PoolEntryType, PoolPaymentStatus
from beachdesk.models.pricing import PriceRate
from beachdesk.models.rental import (
    PaymentMethod,
    Rental,
    RentalStatus,
    ResourceType,
)

__all__ = [
    "Client",
    "ClientClassification",
    "ESTABLISHMENT_ID",
    "EstablishmentConfig",
    "Payment",
    "PaymentMethod",
    "PoolEntry",
    "PoolEntryType",
    "PoolPaymentStatus",
    "PriceRate",
    "Rental",
    "RentalStatus",
    "ResourceType",
]
