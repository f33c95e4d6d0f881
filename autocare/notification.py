"""Notification records derived from maintenance events."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from .maintenance_state import MaintenanceState
from .maintenance_type import TypeLike, display_name, type_key
from .status import Priority


class NotificationKind(Enum):
    VEHICLE_ADDED = "vehicle_added"
    MAINTENANCE_CRITICAL = "maintenance_critical"
    MAINTENANCE_PENDING = "maintenance_pending"
    MAINTENANCE_COMPLETED = "maintenance_completed"


@dataclass(frozen=True)
class Notification:
    """A user-facing alert about a vehicle or one of its maintenance items."""

    kind: NotificationKind
    title: str
    message: str
    priority: Priority
    maintenance_type: Optional[TypeLike] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def requires_immediate_action(self) -> bool:
        return self.priority == Priority.HIGH and self.maintenance_type is not None

    def is_about(self, maintenance_type: TypeLike) -> bool:
        if self.maintenance_type is None:
            return False
        return type_key(self.maintenance_type) == type_key(maintenance_type)


def vehicle_added_notification(
    vehicle_name: str, now: Optional[datetime] = None
) -> Notification:
    return Notification(
        kind=NotificationKind.VEHICLE_ADDED,
        title="Vehicle added",
        message=(
            f"Your {vehicle_name} was added. "
            "You can start logging its maintenance now."
        ),
        priority=Priority.MEDIUM,
        created_at=now or datetime.now(),
    )


def critical_notification(
    vehicle_name: str, state: MaintenanceState, now: Optional[datetime] = None
) -> Notification:
    """Alert for an item whose health dropped into the critical tier."""
    return Notification(
        kind=NotificationKind.MAINTENANCE_CRITICAL,
        title=f"{state.name} - attention required",
        message=(
            f"{state.name} on your {vehicle_name} is at a critical level "
            f"({state.percentage}%). Service it soon."
        ),
        priority=state.priority,
        maintenance_type=state.maintenance_type,
        created_at=now or datetime.now(),
    )


def scheduled_notification(
    vehicle_name: str,
    maintenance_type: TypeLike,
    scheduled_km: float,
    urgent: bool,
    now: Optional[datetime] = None,
) -> Notification:
    name = display_name(maintenance_type)
    return Notification(
        kind=NotificationKind.MAINTENANCE_PENDING,
        title=f"{name} scheduled",
        message=(
            f"{name} for your {vehicle_name} is scheduled at {scheduled_km:,.0f} km."
        ),
        priority=Priority.HIGH if urgent else Priority.MEDIUM,
        maintenance_type=maintenance_type,
        created_at=now or datetime.now(),
    )


def completed_notification(
    vehicle_name: str, maintenance_type: TypeLike, now: Optional[datetime] = None
) -> Notification:
    name = display_name(maintenance_type)
    return Notification(
        kind=NotificationKind.MAINTENANCE_COMPLETED,
        title=f"{name} completed",
        message=f"{name} on your {vehicle_name} was completed.",
        priority=Priority.LOW,
        maintenance_type=maintenance_type,
        created_at=now or datetime.now(),
    )


def prune_notifications(
    notifications: List[Notification],
    max_age_days: int,
    now: Optional[datetime] = None,
) -> List[Notification]:
    """Drop notifications older than max_age_days."""
    cutoff = (now or datetime.now()) - timedelta(days=max_age_days)
    return [n for n in notifications if n.created_at >= cutoff]


def sort_notifications(notifications: List[Notification]) -> List[Notification]:
    """Highest priority first, newest first within a priority."""
    by_age = sorted(notifications, key=lambda n: n.created_at, reverse=True)
    return sorted(by_age, key=lambda n: n.priority.value)
