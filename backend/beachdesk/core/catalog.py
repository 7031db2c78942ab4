"""Immutable establishment catalog passed to the booking services.

The catalog is a value: services receive it as an argument instead of reading a
process-wide resource table. Reconfiguring the establishment produces a new
catalog (see ``establishment_service.reconfigure_resources``).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from beachdesk.models.rental import ResourceType


@dataclass(frozen=True, slots=True)
class ResourceSpec:
    """Display and capacity data for one resource type."""

    type: ResourceType
    total: int
    prefix: str
    label: str
    icon: str
    capacity_based: bool = False

    def unit_label(self, unit_number: int) -> str:
        return f"{self.prefix}{unit_number}"


@dataclass(frozen=True, slots=True)
class Season:
    """Inclusive booking window."""

    start_date: date
    end_date: date

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def days(self) -> Iterator[date]:
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)


@dataclass(frozen=True, slots=True)
class SpecialWindow:
    """Named holiday block priced as its own period."""

    start_date: date
    days: int = 4
    label: str = ""

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.days - 1)


@dataclass(frozen=True, slots=True)
class ClassificationConfig:
    """Thresholds and discounts for client tiers."""

    frequent_min_reservations: int = 5
    frequent_discount: Decimal = Decimal("5")
    vip_min_reservations: int = 10
    vip_min_spending: Decimal = Decimal("300000")
    vip_discount: Decimal = Decimal("10")


@dataclass(frozen=True, slots=True)
class PoolSettings:
    """Pool ticket prices and group discounts."""

    adult_day_pass: Decimal = Decimal("25000")
    adult_stay_per_day: Decimal = Decimal("22000")
    child_day_pass: Decimal = Decimal("15000")
    child_stay_per_day: Decimal = Decimal("13000")
    age_limit: int = 12
    group_discounts: Mapping[int, Decimal] = field(
        default_factory=lambda: {
            3: Decimal("0.05"),
            4: Decimal("0.10"),
            5: Decimal("0.15"),
        }
    )


RESOURCE_DISPLAY: dict[ResourceType, tuple[str, str, str]] = {
    ResourceType.UMBRELLA: ("S", "Umbrellas", "☂️"),
    ResourceType.TENT: ("C", "Tents", "⛺"),
    ResourceType.PARKING: ("E", "Parking", "🚗"),
    ResourceType.POOL: ("P", "Pool", "🏊"),
}

DEFAULT_QUANTITIES: dict[ResourceType, int] = {
    ResourceType.UMBRELLA: 50,
    ResourceType.TENT: 30,
    ResourceType.PARKING: 80,
    ResourceType.POOL: 50,
}


@dataclass(frozen=True, slots=True)
class ResourceCatalog:
    """Season, holiday window and configured resource types."""

    season: Season
    special_window: SpecialWindow | None
    resources: tuple[ResourceSpec, ...]

    def get(self, resource_type: ResourceType | str) -> ResourceSpec | None:
        try:
            key = ResourceType(resource_type)
        except ValueError:
            return None
        for spec in self.resources:
            if spec.type is key:
                return spec
        return None

    def unit_types(self) -> list[ResourceSpec]:
        """Resource types booked by numbered unit."""
        return [spec for spec in self.resources if not spec.capacity_based]

    def total_units(self) -> int:
        return sum(spec.total for spec in self.unit_types())

    def quantities(self) -> dict[str, int]:
        return {spec.type.value: spec.total for spec in self.resources}


def build_catalog(
    *,
    season: Season,
    special_window: SpecialWindow | None,
    quantities: Mapping[ResourceType | str, int],
) -> ResourceCatalog:
    """Build a catalog from per-type quantities; zero or missing types are omitted."""
    specs: list[ResourceSpec] = []
    for resource_type in ResourceType:
        total = quantities.get(resource_type, quantities.get(resource_type.value, 0))
        if not total or int(total) <= 0:
            continue
        prefix, label, icon = RESOURCE_DISPLAY[resource_type]
        specs.append(
            ResourceSpec(
                type=resource_type,
                total=int(total),
                prefix=prefix,
                label=label,
                icon=icon,
                capacity_based=resource_type is ResourceType.POOL,
            )
        )
    return ResourceCatalog(
        season=season, special_window=special_window, resources=tuple(specs)
    )


__all__ = [
    "ClassificationConfig",
    "DEFAULT_QUANTITIES",
    "PoolSettings",
    "RESOURCE_DISPLAY",
    "ResourceCatalog",
    "ResourceSpec",
    "Season",
    "SpecialWindow",
    "build_catalog",
]
