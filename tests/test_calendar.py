"""Tests for the Greek working-day calendar."""

from __future__ import annotations

from datetime import date, timedelta

import holidays as holidays_oracle
import pytest
from dateutil.easter import EASTER_ORTHODOX, easter

from lexdocket.calendar import (
    DEFAULT_CALENDAR,
    CalendarEngine,
    compute_easter,
    holiday_dates,
    holidays_for_year,
)
from lexdocket.calendar.holidays import julian_to_gregorian_offset
from lexdocket.errors import ValidationError


@pytest.fixture()
def calendar() -> CalendarEngine:
    return DEFAULT_CALENDAR


@pytest.mark.parametrize(
    ("year", "expected"),
    [
        (2000, date(2000, 4, 30)),
        (2016, date(2016, 5, 1)),
        (2023, date(2023, 4, 16)),
        (2024, date(2024, 5, 5)),
        (2025, date(2025, 4, 20)),
        (2026, date(2026, 4, 12)),
    ],
)
def test_orthodox_easter_reference_dates(year: int, expected: date) -> None:
    assert compute_easter(year) == expected


def test_easter_is_always_a_sunday() -> None:
    for year in range(1900, 2101):
        assert compute_easter(year).weekday() == 6


def test_easter_matches_dateutil_orthodox_computus() -> None:
    # dateutil's Orthodox method returns Gregorian dates for 1583-4099.
    for year in range(1583, 4100):
        assert compute_easter(year) == easter(year, EASTER_ORTHODOX), year


def test_julian_offset_is_thirteen_days_this_century() -> None:
    assert julian_to_gregorian_offset(1900) == 13
    assert julian_to_gregorian_offset(2025) == 13
    assert julian_to_gregorian_offset(2099) == 13
    assert julian_to_gregorian_offset(2100) == 14


def test_easter_rejects_unsupported_year() -> None:
    with pytest.raises(ValidationError):
        compute_easter(1200)


def test_every_year_has_thirteen_distinct_holidays() -> None:
    for year in range(1900, 2101):
        entries = holidays_for_year(year)
        assert len(entries) == 13
        assert len(holiday_dates(year)) == 13
        assert all(entry.date.year == year for entry in entries)


def test_holidays_2025() -> None:
    named = {entry.name: entry.date for entry in holidays_for_year(2025)}

    assert named["Clean Monday"] == date(2025, 3, 3)
    assert named["Good Friday"] == date(2025, 4, 18)
    assert named["Easter Sunday"] == date(2025, 4, 20)
    assert named["Easter Monday"] == date(2025, 4, 21)
    assert named["Whit Monday"] == date(2025, 6, 9)
    assert named["Independence Day"] == date(2025, 3, 25)
    assert named["Ochi Day"] == date(2025, 10, 28)


def test_holidays_are_sorted() -> None:
    entries = holidays_for_year(2025)
    assert list(entries) == sorted(entries)


def test_labour_day_moves_off_easter_in_2016() -> None:
    entries = holidays_for_year(2016)
    labour = [entry for entry in entries if entry.name.startswith("Labour Day")]

    assert len(labour) == 1
    assert labour[0].date == date(2016, 5, 3)
    assert labour[0].name == "Labour Day (moved)"


@pytest.mark.parametrize("year", list(range(2000, 2031)))
def test_moveable_holidays_match_independent_source(year: int) -> None:
    oracle = holidays_oracle.Greece(years=year)
    moveable = [entry for entry in holidays_for_year(year) if entry.kind == "moveable"]

    assert len(moveable) == 5
    # Easter Sunday is a Sunday anyway; not every release of the oracle lists it.
    for entry in moveable:
        if entry.name == "Easter Sunday":
            continue
        assert entry.date in oracle, f"{entry.name} {entry.date} missing from oracle"


def test_weekends_and_holidays_are_not_working_days(calendar: CalendarEngine) -> None:
    assert not calendar.is_working_day(date(2025, 6, 14))  # Saturday
    assert not calendar.is_working_day(date(2025, 6, 15))  # Sunday
    assert not calendar.is_working_day(date(2025, 3, 25))  # Independence Day, Tuesday
    assert not calendar.is_working_day(date(2025, 6, 9))  # Whit Monday
    assert calendar.is_working_day(date(2025, 6, 10))


def test_every_holiday_is_non_working(calendar: CalendarEngine) -> None:
    for year in (2016, 2024, 2025):
        for entry in holidays_for_year(year):
            assert not calendar.is_working_day(entry.date)


def test_holiday_name(calendar: CalendarEngine) -> None:
    assert calendar.holiday_name(date(2025, 12, 25)) == "Christmas Day"
    assert calendar.holiday_name(date(2025, 6, 10)) is None


def test_add_working_days_skips_easter_weekend(calendar: CalendarEngine) -> None:
    # Thursday before Good Friday; Friday to Monday are all closed.
    assert calendar.add_working_days(date(2025, 4, 17), 1) == date(2025, 4, 22)


def test_add_working_days_five_after_hearing(calendar: CalendarEngine) -> None:
    assert calendar.add_working_days(date(2025, 6, 10), 5) == date(2025, 6, 17)


def test_add_zero_working_days_returns_input(calendar: CalendarEngine) -> None:
    saturday = date(2025, 6, 14)
    assert calendar.add_working_days(saturday, 0) == saturday
    assert calendar.subtract_working_days(saturday, 0) == saturday


def test_negative_working_day_count_is_rejected(calendar: CalendarEngine) -> None:
    with pytest.raises(ValidationError):
        calendar.add_working_days(date(2025, 6, 10), -1)
    with pytest.raises(ValidationError):
        calendar.subtract_working_days(date(2025, 6, 10), -3)


def test_subtract_working_days_skips_whit_monday(calendar: CalendarEngine) -> None:
    assert calendar.subtract_working_days(date(2025, 6, 10), 1) == date(2025, 6, 6)
    assert calendar.subtract_working_days(date(2025, 6, 10), 5) == date(2025, 6, 2)


def test_result_of_adding_is_always_a_working_day(calendar: CalendarEngine) -> None:
    start = date(2025, 1, 1)
    for offset in range(0, 365, 3):
        anchor = start + timedelta(days=offset)
        for n in (1, 2, 7, 20):
            assert calendar.is_working_day(calendar.add_working_days(anchor, n))


def test_count_inverts_add_for_working_days(calendar: CalendarEngine) -> None:
    for anchor in calendar.working_days_in_range(date(2024, 12, 1), date(2025, 12, 31)):
        for n in (0, 1, 5, 15, 20):
            assert calendar.count_working_days(anchor, calendar.add_working_days(anchor, n)) == n


def test_count_working_days_is_negative_backwards(calendar: CalendarEngine) -> None:
    assert calendar.count_working_days(date(2025, 6, 17), date(2025, 6, 10)) == -5
    assert calendar.count_working_days(date(2025, 6, 10), date(2025, 6, 10)) == 0


def test_next_and_previous_working_day(calendar: CalendarEngine) -> None:
    assert calendar.next_working_day(date(2025, 6, 6)) == date(2025, 6, 10)
    assert calendar.previous_working_day(date(2025, 6, 10)) == date(2025, 6, 6)


def test_august_is_recess_but_still_counts_for_deadlines(calendar: CalendarEngine) -> None:
    assert calendar.is_court_recess(date(2025, 8, 4))
    assert calendar.is_working_day(date(2025, 8, 4))
    assert calendar.add_working_days(date(2025, 7, 31), 1) == date(2025, 8, 1)


def test_next_court_date(calendar: CalendarEngine) -> None:
    assert calendar.next_court_date(date(2025, 7, 31)) == date(2025, 7, 31)
    assert calendar.next_court_date(date(2025, 8, 1)) == date(2025, 9, 1)
    assert calendar.next_court_date(date(2025, 6, 7)) == date(2025, 6, 10)


def test_working_days_in_range(calendar: CalendarEngine) -> None:
    days = calendar.working_days_in_range(date(2025, 6, 6), date(2025, 6, 13))
    assert days == [
        date(2025, 6, 6),
        date(2025, 6, 10),
        date(2025, 6, 11),
        date(2025, 6, 12),
        date(2025, 6, 13),
    ]
