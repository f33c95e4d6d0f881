"""MaintenanceState value type and the service-completion transition."""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from .calculations import (
    calc_due_km,
    calc_percentage,
    calc_remaining_km,
    check_status,
    needs_notification as percentage_needs_notification,
    priority_for,
)
from .maintenance_type import TypeLike, display_name, interval_for, time_limit_for
from .status import Priority, Status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaintenanceState:
    """Current standing of one maintenance item on one vehicle."""

    maintenance_type: TypeLike
    last_serviced_at: datetime
    due_at_km: int
    percentage: int = 100

    @property
    def interval(self) -> int:
        return interval_for(self.maintenance_type)

    @property
    def name(self) -> str:
        return display_name(self.maintenance_type)

    @property
    def status(self) -> Status:
        return check_status(self.percentage)

    @property
    def priority(self) -> Priority:
        return priority_for(self.status)

    @property
    def needs_notification(self) -> bool:
        return percentage_needs_notification(self.percentage)

    def remaining_km(self, current_km: float) -> float:
        return calc_remaining_km(current_km, self.due_at_km)

    def is_overdue_by_km(self, current_km: float) -> bool:
        return current_km >= self.due_at_km

    def is_overdue_by_time(self, as_of: Optional[datetime] = None) -> bool:
        """True when the item has a time limit and the last service is older than it."""
        limit = time_limit_for(self.maintenance_type)
        if limit is None:
            return False
        as_of = as_of or datetime.now()
        return as_of > self.last_serviced_at + limit

    def recompute(self, current_km: float) -> "MaintenanceState":
        """Return a copy with the percentage derived from a new odometer reading."""
        percentage = calc_percentage(current_km, self.due_at_km, self.interval)
        logger.debug(
            "%s at %s km: %s%% (due at %s)",
            self.name,
            current_km,
            percentage,
            self.due_at_km,
        )
        return replace(self, percentage=percentage)


def complete_service(
    state: MaintenanceState,
    distance_at_service: float,
    now: Optional[datetime] = None,
) -> MaintenanceState:
    """
    Reset a maintenance item after a service.

    The next due odometer is distance_at_service + the type's interval and
    the percentage goes back to 100. The odometer value is trusted as given.
    """
    return replace(
        state,
        last_serviced_at=now or datetime.now(),
        due_at_km=calc_due_km(distance_at_service, state.maintenance_type),
        percentage=100,
    )


def new_state(
    maintenance_type: TypeLike, current_km: float, now: Optional[datetime] = None
) -> MaintenanceState:
    """State for a newly registered vehicle: treated as serviced at current_km."""
    return MaintenanceState(
        maintenance_type=maintenance_type,
        last_serviced_at=now or datetime.now(),
        due_at_km=calc_due_km(current_km, maintenance_type),
        percentage=100,
    )
