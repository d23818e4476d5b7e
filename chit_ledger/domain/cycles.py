"""Cycle schedule generation for chit funds with flexible recurrence"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from chit_ledger.domain.models import (
    Cycle,
    CycleGenerationOptions,
    CycleConfigValidation,
    IntervalType,
)
from chit_ledger.domain.exceptions import UnsupportedIntervalError
from chit_ledger.utils.date_utils import add_months, parse_iso_date, to_iso_date

AVG_DAYS_PER_MONTH = Decimal("30.44")

# Upper bound on interval_value per interval type
MAX_INTERVAL_VALUE = {
    IntervalType.WEEKLY: 4,
    IntervalType.MONTHLY: 12,
    IntervalType.CUSTOM_DAYS: 365,
}

INTERVAL_TYPE_OPTIONS = [
    {"value": "weekly", "label": "Weekly", "description": "Every week(s)"},
    {"value": "monthly", "label": "Monthly", "description": "Every month(s)"},
    {"value": "custom_days", "label": "Custom Days", "description": "Every X days"},
]

COMMON_INTERVALS = {
    "weekly": [
        {"value": 1, "label": "Every week", "description": "7 days"},
        {"value": 2, "label": "Every 2 weeks", "description": "14 days"},
    ],
    "monthly": [
        {"value": 1, "label": "Every month", "description": "~30 days"},
        {"value": 2, "label": "Every 2 months", "description": "~60 days"},
        {"value": 3, "label": "Every 3 months", "description": "~90 days"},
    ],
    "custom_days": [
        {"value": 7, "label": "Every 7 days", "description": "Weekly equivalent"},
        {"value": 10, "label": "Every 10 days", "description": "Popular option"},
        {"value": 15, "label": "Every 15 days", "description": "Bi-monthly"},
        {"value": 30, "label": "Every 30 days", "description": "Monthly equivalent"},
    ],
}


def _interval(interval_type: str) -> IntervalType:
    try:
        return IntervalType(interval_type)
    except ValueError:
        raise UnsupportedIntervalError(str(interval_type)) from None


def calculate_cycle_date(
    start_date: date,
    cycle_index: int,
    interval_type: str,
    interval_value: int,
) -> date:
    """
    Date of the cycle at a 0-based index.

    Always computed from start_date, so monthly schedules anchored on the
    29th-31st clamp to short months without drifting afterwards.

    Raises:
        UnsupportedIntervalError: interval_type is not weekly/monthly/custom_days
    """
    kind = _interval(interval_type)

    if kind is IntervalType.WEEKLY:
        return start_date + timedelta(days=cycle_index * interval_value * 7)
    if kind is IntervalType.MONTHLY:
        return add_months(start_date, cycle_index * interval_value)
    return start_date + timedelta(days=cycle_index * interval_value)


def generate_cycles(chit_fund_id: Optional[str], options: CycleGenerationOptions) -> List[Cycle]:
    """
    Generate the full cycle schedule for a fund.

    Requirements:
    - Cycle numbers run 1..total_cycles in date order
    - First cycle is "active", the rest "upcoming"
    - total_amount starts at 0 for every cycle
    - Identical inputs always yield identical schedules

    Example:
        start 2024-01-31, 3 cycles, monthly x1
        → 2024-01-31 (active), 2024-02-29, 2024-03-31 (upcoming)
    """
    start = parse_iso_date(options.start_date)
    _interval(options.interval_type)

    cycles = []
    for i in range(options.total_cycles):
        cycle_date = calculate_cycle_date(start, i, options.interval_type, options.interval_value)
        cycles.append(
            Cycle(
                chit_fund_id=chit_fund_id,
                cycle_number=i + 1,
                cycle_date=cycle_date,
                status="active" if i == 0 else "upcoming",
            )
        )

    return cycles


def calculate_end_date(
    start_date: date | str,
    total_cycles: int,
    interval_type: str,
    interval_value: int,
) -> date | str:
    """Date of the last cycle; returns an ISO string when given one"""
    if total_cycles < 1:
        raise ValueError("Total cycles must be greater than 0")

    end = calculate_cycle_date(parse_iso_date(start_date), total_cycles - 1, interval_type, interval_value)
    return to_iso_date(end) if isinstance(start_date, str) else end


def calculate_total_duration(total_cycles: int, interval_type: str, interval_value: int) -> int:
    """Estimated days between first and last cycle (months averaged at 30.44 days)"""
    kind = _interval(interval_type)
    spans = (total_cycles - 1) * interval_value

    if kind is IntervalType.WEEKLY:
        return spans * 7
    if kind is IntervalType.MONTHLY:
        return int((spans * AVG_DAYS_PER_MONTH).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return spans


def validate_cycle_configuration(
    interval_type: str,
    interval_value: int,
    total_cycles: int,
    start_date: Optional[date | str] = None,
) -> CycleConfigValidation:
    """
    Check a schedule configuration before any cycle is written. Never raises.

    There is no upper bound on total_cycles, but when start_date is given the
    last cycle must still fall within the supported calendar (year 9999).
    """
    if interval_value <= 0:
        return CycleConfigValidation(is_valid=False, error="Interval value must be greater than 0")

    if total_cycles <= 0:
        return CycleConfigValidation(is_valid=False, error="Total cycles must be greater than 0")

    try:
        kind = _interval(interval_type)
    except UnsupportedIntervalError as e:
        return CycleConfigValidation(is_valid=False, error=str(e))

    if interval_value > MAX_INTERVAL_VALUE[kind]:
        if kind is IntervalType.WEEKLY:
            error = "Weekly interval cannot exceed 4 weeks"
        elif kind is IntervalType.MONTHLY:
            error = "Monthly interval cannot exceed 12 months"
        else:
            error = "Custom interval cannot exceed 365 days"
        return CycleConfigValidation(is_valid=False, error=error)

    if start_date is not None:
        try:
            start = parse_iso_date(start_date)
        except ValueError:
            return CycleConfigValidation(is_valid=False, error="Start date must be a valid YYYY-MM-DD date")
        try:
            calculate_cycle_date(start, total_cycles - 1, kind.value, interval_value)
        except (ValueError, OverflowError):
            return CycleConfigValidation(is_valid=False, error="Schedule extends beyond the supported date range")

    return CycleConfigValidation(is_valid=True)


def get_interval_description(interval_type: str, interval_value: int, total_cycles: int) -> str:
    """Human-readable summary, e.g. "12 cycles, every month" or "10 cycles, every 2 weeks" """
    unit = {
        IntervalType.WEEKLY: "week",
        IntervalType.MONTHLY: "month",
        IntervalType.CUSTOM_DAYS: "day",
    }[_interval(interval_type)]

    interval_text = unit if interval_value == 1 else f"{interval_value} {unit}s"
    return f"{total_cycles} cycles, every {interval_text}"
