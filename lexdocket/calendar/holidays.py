"""Greek public holidays, fixed and Orthodox-Easter relative."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import Literal

from lexdocket.errors import ValidationError

HolidayKind = Literal["fixed", "moveable"]

MIN_YEAR = 1583
MAX_YEAR = 9998

# (month, day, name)
FIXED_HOLIDAYS: tuple[tuple[int, int, str], ...] = (
    (1, 1, "New Year's Day"),
    (1, 6, "Epiphany"),
    (3, 25, "Independence Day"),
    (5, 1, "Labour Day"),
    (8, 15, "Assumption of Mary"),
    (10, 28, "Ochi Day"),
    (12, 25, "Christmas Day"),
    (12, 26, "Synaxis of the Mother of God"),
)

# (days from Orthodox Easter Sunday, name)
EASTER_OFFSETS: tuple[tuple[int, str], ...] = (
    (-48, "Clean Monday"),
    (-2, "Good Friday"),
    (0, "Easter Sunday"),
    (1, "Easter Monday"),
    (50, "Whit Monday"),
)


@dataclass(frozen=True, slots=True, order=True)
class Holiday:
    """A single public holiday. Ordered by date."""

    date: date
    name: str
    kind: HolidayKind


def _check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Year {year} outside supported range {MIN_YEAR}-{MAX_YEAR}")


def julian_to_gregorian_offset(year: int) -> int:
    """Days between the Julian and Gregorian calendars from March of ``year``.

    13 for 1900-2099.
    """
    return year // 100 - year // 400 - 2


@lru_cache(maxsize=None)
def compute_easter(year: int) -> date:
    """Return Orthodox Easter Sunday for ``year`` on the Gregorian calendar.

    Meeus' Julian algorithm yields a date in the Julian calendar, which is then
    shifted onto the (proleptic) Gregorian calendar used everywhere else.

    Args:
        year: Calendar year (1583-9998)

    Returns:
        Gregorian date of Orthodox Easter Sunday

    Raises:
        ValidationError: If ``year`` is outside the supported range
    """
    _check_year(year)

    a = year % 4
    b = year % 7
    c = year % 19
    d = (19 * c + 15) % 30
    e = (2 * a + 4 * b - d + 34) % 7
    month, day = divmod(d + e + 114, 31)

    julian_easter = date(year, month, day + 1)
    return julian_easter + timedelta(days=julian_to_gregorian_offset(year))


@lru_cache(maxsize=None)
def holidays_for_year(year: int) -> tuple[Holiday, ...]:
    """Return the 13 public holidays of ``year`` sorted by date.

    Moveable holidays are placed first. A fixed holiday that lands on an
    already-taken day (Labour Day on Easter Sunday or Monday, as in 2016)
    moves to the next free day, so every year has 13 distinct dates.
    """
    easter = compute_easter(year)

    taken: dict[date, Holiday] = {}
    for offset, name in EASTER_OFFSETS:
        day = easter + timedelta(days=offset)
        taken[day] = Holiday(date=day, name=name, kind="moveable")

    for month, day_of_month, name in FIXED_HOLIDAYS:
        day = date(year, month, day_of_month)
        label = name
        while day in taken:
            day += timedelta(days=1)
            label = f"{name} (moved)"
        taken[day] = Holiday(date=day, name=label, kind="fixed")

    return tuple(sorted(taken.values()))


@lru_cache(maxsize=None)
def holiday_dates(year: int) -> frozenset[date]:
    """Set view of :func:`holidays_for_year` for membership checks."""
    return frozenset(holiday.date for holiday in holidays_for_year(year))
