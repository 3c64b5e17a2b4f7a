"""Parsing and formatting of user-entered dates."""

from __future__ import annotations

from datetime import date, datetime

from lexdocket.errors import ValidationError

_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")


def parse_date(value: str) -> date:
    """Parse an ISO (``2025-06-10``) or Greek (``10/06/2025``) date.

    Raises:
        ValidationError: If ``value`` matches none of the accepted formats
    """
    text = value.strip()
    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Unrecognised date '{value}'; use YYYY-MM-DD or DD/MM/YYYY")


def format_greek(value: date) -> str:
    return value.strftime("%d/%m/%Y")
