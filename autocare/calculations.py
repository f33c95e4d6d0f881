"""Helper functions for maintenance percentage and status calculations."""

from decimal import Decimal, ROUND_HALF_UP

from .errors import InvalidIntervalError, OutOfRangePercentageError
from .maintenance_type import TypeLike, interval_for
from .status import Priority, Status

CRITICAL_THRESHOLD = 30
UPCOMING_THRESHOLD = 50
EXCELLENT_THRESHOLD = 80

_PRIORITIES = {
    Status.CRITICAL: Priority.HIGH,
    Status.UPCOMING: Priority.MEDIUM,
    Status.GOOD: Priority.LOW,
    Status.EXCELLENT: Priority.LOW,
}


def calc_remaining_km(current_km: float, due_at_km: float) -> float:
    """Distance left until the item is due. Negative when overdue."""
    return due_at_km - current_km


def calc_due_km(distance_at_service: float, maintenance_type: TypeLike) -> float:
    """Next due odometer value: distance at service + interval for the type."""
    return distance_at_service + interval_for(maintenance_type)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calc_percentage(current_km: float, due_at_km: float, interval: float) -> int:
    """
    Remaining-life percentage of a maintenance item.

    - remaining <= 0: 0 (overdue, never negative)
    - otherwise: round(remaining / interval * 100), clamped to 0..100

    Raises InvalidIntervalError for a zero or negative interval.
    """
    if interval <= 0:
        raise InvalidIntervalError(interval)

    remaining = calc_remaining_km(current_km, due_at_km)
    if remaining <= 0:
        return 0

    raw = round_half_up(Decimal(remaining) * 100 / Decimal(interval))
    percentage = max(0, min(100, raw))
    if not 0 <= percentage <= 100:
        raise OutOfRangePercentageError(percentage)
    return percentage


def check_status(percentage: int) -> Status:
    """Classify a percentage into a status tier."""
    if percentage < CRITICAL_THRESHOLD:
        return Status.CRITICAL
    if percentage < UPCOMING_THRESHOLD:
        return Status.UPCOMING
    if percentage < EXCELLENT_THRESHOLD:
        return Status.GOOD
    return Status.EXCELLENT


def priority_for(status: Status) -> Priority:
    return _PRIORITIES[status]


def needs_notification(percentage: int) -> bool:
    """Only critical items raise an alert on their own."""
    return check_status(percentage) == Status.CRITICAL
