"""Working-day calendar for Greek courts.

Weekends and the 13 public holidays are non-working days. August is the
court recess: it only affects court date suggestions, never generic deadline
arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from lexdocket.calendar.holidays import Holiday, compute_easter, holiday_dates, holidays_for_year
from lexdocket.errors import ValidationError

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class CalendarEngine:
    """Court working-day calendar.

    Attributes:
        weekend_days: Weekday numbers treated as weekend (Monday=0)
        recess_month: Month during which courts do not sit
    """

    weekend_days: frozenset[int] = field(default_factory=lambda: frozenset({5, 6}))
    recess_month: int = 8

    # ------------------------------------------------------------------#
    # Holidays
    # ------------------------------------------------------------------#

    def easter(self, year: int) -> date:
        """Orthodox Easter Sunday for ``year``."""
        return compute_easter(year)

    def holidays(self, year: int) -> tuple[Holiday, ...]:
        """Public holidays for ``year`` sorted by date."""
        return holidays_for_year(year)

    def is_holiday(self, day: date) -> bool:
        return day in holiday_dates(day.year)

    def holiday_name(self, day: date) -> str | None:
        """Return the holiday name for ``day`` or None when it is not a holiday."""
        if not self.is_holiday(day):
            return None
        for holiday in holidays_for_year(day.year):
            if holiday.date == day:
                return holiday.name
        return None

    # ------------------------------------------------------------------#
    # Predicates
    # ------------------------------------------------------------------#

    def is_weekend(self, day: date) -> bool:
        return day.weekday() in self.weekend_days

    def is_working_day(self, day: date) -> bool:
        """Check if a date is a working day.

        Args:
            day: Date to check

        Returns:
            False on weekends and public holidays, True otherwise
        """
        if self.is_weekend(day):
            return False
        return not self.is_holiday(day)

    def is_court_recess(self, day: date) -> bool:
        """True for every day of the summer recess month."""
        return day.month == self.recess_month

    # ------------------------------------------------------------------#
    # Arithmetic
    # ------------------------------------------------------------------#

    def add_working_days(self, start: date, days: int) -> date:
        """Advance ``days`` working days from ``start``.

        ``start`` itself is never counted. With ``days == 0`` the input is
        returned unchanged, even when it is not a working day.

        Args:
            start: Anchor date
            days: Number of working days to advance (>= 0)

        Returns:
            The working day reached after consuming ``days`` working days

        Raises:
            ValidationError: If ``days`` is negative
        """
        return self._walk(start, days, _ONE_DAY)

    def subtract_working_days(self, start: date, days: int) -> date:
        """Step back ``days`` working days from ``start``; mirror of :meth:`add_working_days`."""
        return self._walk(start, days, -_ONE_DAY)

    def _walk(self, start: date, days: int, step: timedelta) -> date:
        if days < 0:
            raise ValidationError(f"Working day count must be zero or positive, got {days}")

        current = start
        remaining = days
        while remaining > 0:
            current += step
            if self.is_working_day(current):
                remaining -= 1
        return current

    def count_working_days(self, start: date, end: date) -> int:
        """Count working days in the half-open interval ``(start, end]``.

        Inverse of :meth:`add_working_days`:
        ``count_working_days(d, add_working_days(d, n)) == n``. Negative when
        ``end`` precedes ``start``.
        """
        if end < start:
            return -self.count_working_days(end, start)

        count = 0
        current = start
        while current < end:
            current += _ONE_DAY
            if self.is_working_day(current):
                count += 1
        return count

    def next_working_day(self, day: date) -> date:
        """First working day strictly after ``day``."""
        return self.add_working_days(day, 1)

    def previous_working_day(self, day: date) -> date:
        """Last working day strictly before ``day``."""
        return self.subtract_working_days(day, 1)

    def next_court_date(self, day: date) -> date:
        """First date on or after ``day`` when courts sit (working day, outside recess)."""
        current = day
        while not self.is_working_day(current) or self.is_court_recess(current):
            current += _ONE_DAY
        return current

    def working_days_in_range(self, start: date, end: date) -> list[date]:
        """All working days between ``start`` and ``end`` inclusive."""
        days: list[date] = []
        current = start
        while current <= end:
            if self.is_working_day(current):
                days.append(current)
            current += _ONE_DAY
        return days


DEFAULT_CALENDAR = CalendarEngine()
