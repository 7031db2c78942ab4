"""Pricing period derivation.

Periods are always recomputed from the season and the holiday window; nothing
here is persisted or cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from beachdesk.core.catalog import Season, SpecialWindow

PERIOD_LENGTH_DAYS = 15
# A tail of this many days or fewer is folded into the current period.
TAIL_MERGE_DAYS = 20


@dataclass(frozen=True, slots=True)
class PricingPeriod:
    """A contiguous pricing window within the season."""

    id: int
    start_date: date
    end_date: date
    special: bool = False
    label: str | None = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in the inclusive range."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def count_days(start: date, end: date) -> int:
    """Inclusive day count between two dates."""
    return (end - start).days + 1


def compute_periods(
    season: Season, special_window: SpecialWindow | None = None
) -> list[PricingPeriod]:
    """Split the season into ~15 day periods with the holiday carved out."""
    window = special_window
    if window is not None and not (
        season.contains(window.start_date) and season.contains(window.end_date)
    ):
        window = None

    periods: list[PricingPeriod] = []
    pointer = season.start_date
    season_end = season.end_date

    while pointer <= season_end:
        next_id = len(periods) + 1

        if window is not None and pointer == window.start_date:
            periods.append(
                PricingPeriod(
                    id=next_id,
                    start_date=window.start_date,
                    end_date=window.end_date,
                    special=True,
                    label=window.label or None,
                )
            )
            pointer = window.end_date + timedelta(days=1)
            continue

        stride_end = pointer + timedelta(days=PERIOD_LENGTH_DAYS - 1)

        if window is not None and pointer < window.start_date <= stride_end:
            periods.append(
                PricingPeriod(
                    id=next_id,
                    start_date=pointer,
                    end_date=window.start_date - timedelta(days=1),
                )
            )
            pointer = window.start_date
            continue

        remaining = count_days(pointer, season_end)
        if remaining <= TAIL_MERGE_DAYS or stride_end >= season_end:
            # A holiday window still ahead keeps its own period.
            if window is None or window.start_date < pointer:
                periods.append(
                    PricingPeriod(id=next_id, start_date=pointer, end_date=season_end)
                )
                break

        periods.append(
            PricingPeriod(id=next_id, start_date=pointer, end_date=stride_end)
        )
        pointer = stride_end + timedelta(days=1)

    return periods


def find_period(periods: Iterable[PricingPeriod], day: date) -> PricingPeriod | None:
    """Return the period containing ``day`` (linear scan)."""
    for period in periods:
        if period.contains(day):
            return period
    return None


def periods_by_id(periods: Sequence[PricingPeriod]) -> dict[int, PricingPeriod]:
    return {period.id: period for period in periods}
