"""Tests for pricing period derivation."""

from __future__ import annotations

from datetime import date, timedelta

from beachdesk.core.catalog import Season, SpecialWindow
from beachdesk.services import period_service

SEASON = Season(start_date=date(2025, 12, 1), end_date=date(2026, 2, 28))
CARNIVAL = SpecialWindow(start_date=date(2026, 2, 14), days=4, label="Carnaval")


def _assert_contiguous(periods, season: Season) -> None:
    assert periods[0].start_date == season.start_date
    assert periods[-1].end_date == season.end_date
    for previous, current in zip(periods, periods[1:]):
        assert current.start_date == previous.end_date + timedelta(days=1)
    assert [p.id for p in periods] == list(range(1, len(periods) + 1))


def test_periods_cover_season_with_holiday_carved_out() -> None:
    periods = period_service.compute_periods(SEASON, CARNIVAL)

    _assert_contiguous(periods, SEASON)
    assert [(p.start_date, p.end_date) for p in periods] == [
        (date(2025, 12, 1), date(2025, 12, 15)),
        (date(2025, 12, 16), date(2025, 12, 30)),
        (date(2025, 12, 31), date(2026, 1, 14)),
        (date(2026, 1, 15), date(2026, 1, 29)),
        (date(2026, 1, 30), date(2026, 2, 13)),
        (date(2026, 2, 14), date(2026, 2, 17)),
        (date(2026, 2, 18), date(2026, 2, 28)),
    ]
    special = [p for p in periods if p.special]
    assert len(special) == 1
    assert special[0].label == "Carnaval"
    assert special[0].days == 4


def test_short_tail_is_merged_into_last_period() -> None:
    periods = period_service.compute_periods(SEASON, None)

    _assert_contiguous(periods, SEASON)
    assert not any(p.special for p in periods)
    assert periods[-1].start_date == date(2026, 2, 14)
    assert periods[-1].days == 15


def test_window_outside_season_is_ignored() -> None:
    window = SpecialWindow(start_date=date(2026, 3, 2), days=4, label="Late")

    assert period_service.compute_periods(SEASON, window) == (
        period_service.compute_periods(SEASON, None)
    )


def test_window_split_before_full_stride() -> None:
    window = SpecialWindow(start_date=date(2025, 12, 8), days=3, label="Feriado")

    periods = period_service.compute_periods(SEASON, window)

    _assert_contiguous(periods, SEASON)
    assert periods[0].end_date == date(2025, 12, 7)
    assert periods[1].special
    assert (periods[1].start_date, periods[1].end_date) == (
        date(2025, 12, 8),
        date(2025, 12, 10),
    )


def test_every_season_day_belongs_to_exactly_one_period() -> None:
    periods = period_service.compute_periods(SEASON, CARNIVAL)

    for day in SEASON.days():
        matches = [p for p in periods if p.contains(day)]
        assert len(matches) == 1
    assert period_service.find_period(periods, date(2026, 2, 15)).special
    assert period_service.find_period(periods, date(2026, 3, 1)) is None


def test_recomputing_periods_is_stable() -> None:
    first = period_service.compute_periods(SEASON, CARNIVAL)
    second = period_service.compute_periods(SEASON, CARNIVAL)

    assert first == second
    assert period_service.count_days(date(2025, 12, 10), date(2025, 12, 15)) == 6


def test_season_shorter_than_one_period_yields_single_period() -> None:
    short = Season(start_date=date(2026, 1, 1), end_date=date(2026, 1, 10))

    periods = period_service.compute_periods(short, None)

    assert len(periods) == 1
    assert not periods[0].special
    assert (periods[0].start_date, periods[0].end_date) == (
        date(2026, 1, 1),
        date(2026, 1, 10),
    )
    assert periods[0].days == 10
