"""Greek court calendar: holidays, working days and date arithmetic."""

from lexdocket.calendar.engine import DEFAULT_CALENDAR, CalendarEngine
from lexdocket.calendar.holidays import (
    Holiday,
    compute_easter,
    holiday_dates,
    holidays_for_year,
)

__all__ = [
    "CalendarEngine",
    "DEFAULT_CALENDAR",
    "Holiday",
    "compute_easter",
    "holiday_dates",
    "holidays_for_year",
]
