"""Schema exports."""

from beachdesk.schemas.client import (
    BlacklistRequest,
    ClientCreate,
    ClientRead,
    ClientStatsRead,
    ClientUpdate,
)
from beachdesk.schemas.establishment import (
    ClassificationConfigSchema,
    EstablishmentRead,
    PoolSettingsSchema,
    ResourceReconfigure,
    ResourceSpecRead,
)
from beachdesk.schemas.payment import (
    MethodStatsRead,
    PaymentCreate,
    PaymentRead,
    PaymentSummaryRead,
)
from beachdesk.schemas.pool import (
    PoolEntryCreate,
    PoolEntryRead,
    PoolOccupancyRead,
    PoolQuoteRead,
    PoolRangeStatsRead,
    PoolRevenueRead,
)
from beachdesk.schemas.pricing import (
    PriceQuoteRead,
    PriceSuggestionRead,
    PriceTableRead,
    PriceTableUpdate,
    PricingCompletenessRead,
    PricingPeriodRead,
)
from beachdesk.schemas.rental import (
    PriceBreakdownRead,
    RentalBookingRead,
    RentalCreate,
    RentalMoveRequest,
    RentalRead,
    RentalUpdate,
    UnitStatusRead,
)
from beachdesk.schemas.reporting import (
    AvailabilitySummaryRead,
    DashboardRead,
    FirstAvailableUnitRead,
    OccupancyPointRead,
    ResourceIncomeRead,
)

__all__ = [
    "AvailabilitySummaryRead",
    "BlacklistRequest",
    "ClassificationConfigSchema",
    "ClientCreate",
    "ClientRead",
    "ClientStatsRead",
    "ClientUpdate",
    "DashboardRead",
    "EstablishmentRead",
    "FirstAvailableUnitRead",
    "MethodStatsRead",
    "OccupancyPointRead",
    "PaymentCreate",
    "PaymentRead",
    "PaymentSummaryRead",
    "PoolEntryCreate",
    "PoolEntryRead",
    "PoolOccupancyRead",
    "PoolQuoteRead",
    "PoolRangeStatsRead",
    "PoolRevenueRead",
    "PoolSettingsSchema",
    "PriceBreakdownRead",
    "PriceQuoteRead",
    "PriceSuggestionRead",
    "PriceTableRead",
    "PriceTableUpdate",
    "PricingCompletenessRead",
    "PricingPeriodRead",
    "RentalBookingRead",
    "RentalCreate",
    "RentalMoveRequest",
    "RentalRead",
    "RentalUpdate",
    "ResourceIncomeRead",
    "ResourceReconfigure",
    "ResourceSpecRead",
]
