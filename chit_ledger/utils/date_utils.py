"""Date manipulation utilities"""

from datetime import date
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """
    Add calendar months, clamping to the last day of the target month.

    2024-01-31 + 1 month -> 2024-02-29, + 2 months -> 2024-03-31.
    """
    return from_date + relativedelta(months=months)


def parse_iso_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD string (dates pass through unchanged)"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def to_iso_date(value: date) -> str:
    """Serialize a date as YYYY-MM-DD for the store"""
    return value.isoformat()
