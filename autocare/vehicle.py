"""Vehicle class - the main aggregate for odometer, maintenance states and history."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from .errors import ValidationError
from .history_entry import COMPLETED, PENDING, URGENT, HistoryEntry
from .maintenance_state import MaintenanceState, complete_service, new_state
from .maintenance_type import (
    VEHICLE_TYPES,
    TypeLike,
    display_name,
    type_key,
    types_for_vehicle,
)
from .notification import (
    Notification,
    NotificationKind,
    completed_notification,
    critical_notification,
    scheduled_notification,
    vehicle_added_notification,
)
from .status import Status

logger = logging.getLogger(__name__)

MAX_KM = 999999
MAX_COST = 999999.99
MAX_SCHEDULE_AHEAD_KM = 100000
URGENT_WITHIN_KM = 500
DEFAULT_SCHEDULE_DAYS = 30


@dataclass
class VehicleStatistics:
    """Completed-service totals for a vehicle."""

    total_completed: int = 0
    on_time: int = 0
    total_cost: float = 0.0

    @property
    def on_time_percentage(self) -> float:
        if self.total_completed == 0:
            return 0.0
        return self.on_time / self.total_completed * 100


def validate_km(km: float) -> None:
    if not 0 <= km <= MAX_KM:
        raise ValidationError(f"Error: mileage must be between 0 and {MAX_KM:,} km")


def validate_cost(cost: Optional[float]) -> None:
    if cost is not None and not 0 <= cost <= MAX_COST:
        raise ValidationError(f"Error: cost must be between 0 and {MAX_COST:,.2f}")


def validate_date(value: str) -> None:
    """Service dates are stored as ISO strings (YYYY-MM-DD)."""
    try:
        date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Error: invalid date '{value}', expected YYYY-MM-DD")


def validate_vehicle(make: str, model: str, year: int, vehicle_type: str, km: float) -> None:
    """Reject registration data the way the signup form would."""
    if len(make.strip()) < 2:
        raise ValidationError("Error: make must have at least 2 characters")
    if not model.strip():
        raise ValidationError("Error: model must not be empty")
    max_year = date.today().year + 1
    if not 1900 <= year <= max_year:
        raise ValidationError(f"Error: year must be between 1900 and {max_year}")
    validate_km(km)
    if vehicle_type not in VEHICLE_TYPES:
        raise ValidationError('Error: type must be "car" or "motorcycle"')


class Vehicle:
    """Complete vehicle record with odometer, maintenance states and history."""

    def __init__(
        self,
        make: str,
        model: str,
        year: int,
        vehicle_type: str,
        current_km: float,
        states: Optional[List[MaintenanceState]] = None,
        history: Optional[List[HistoryEntry]] = None,
        notifications: Optional[List[Notification]] = None,
        as_of_date: Optional[str] = None,
    ):
        self.make = make
        self.model = model
        self.year = year
        self.vehicle_type = vehicle_type
        self.current_km = current_km
        self.states = states or []
        self.history = history or []
        self.notifications = notifications or []
        self._as_of_date = as_of_date

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.year} {self.make} {self.model}"

    @property
    def short_name(self) -> str:
        return f"{self.make} {self.model}"

    @property
    def as_of_date(self) -> str:
        """Date of the last odometer reading, defaults to today."""
        if self._as_of_date:
            return self._as_of_date
        return date.today().isoformat()

    @property
    def last_service(self) -> Optional[HistoryEntry]:
        """Most recent completed service overall."""
        completed = [h for h in self.history if h.is_completed]
        if not completed:
            return None
        return max(completed, key=lambda h: (h.date, h.mileage))

    def get_state(self, maintenance_type: TypeLike) -> Optional[MaintenanceState]:
        key = type_key(maintenance_type)
        for state in self.states:
            if type_key(state.maintenance_type) == key:
                return state
        return None

    def _replace_state(self, updated: MaintenanceState) -> None:
        key = type_key(updated.maintenance_type)
        self.states = [
            updated if type_key(s.maintenance_type) == key else s for s in self.states
        ]

    def get_history_for_type(self, maintenance_type: TypeLike) -> List[HistoryEntry]:
        key = type_key(maintenance_type)
        return [h for h in self.history if h.type_key == key]

    def get_history_sorted(
        self, sort_by: str = "date", reverse: bool = True
    ) -> List[HistoryEntry]:
        """
        Get history entries sorted by specified field.

        Args:
            sort_by: "date", "km", or "type"
            reverse: If True, newest/highest first (default)
        """
        if sort_by == "date":
            return sorted(self.history, key=lambda h: h.date, reverse=reverse)
        elif sort_by == "km":
            return sorted(self.history, key=lambda h: h.mileage, reverse=reverse)
        elif sort_by == "type":
            return sorted(
                self.history, key=lambda h: (h.type_key, h.date), reverse=reverse
            )
        return self.history

    def states_by_urgency(self) -> List[MaintenanceState]:
        return sorted(self.states, key=lambda s: (s.percentage, s.name))

    def critical_states(self) -> List[MaintenanceState]:
        return [s for s in self.states_by_urgency() if s.status == Status.CRITICAL]

    def overdue_by_time(self, as_of: Optional[datetime] = None) -> List[MaintenanceState]:
        return [s for s in self.states if s.is_overdue_by_time(as_of)]

    def status_counts(self) -> Dict[Status, int]:
        counts = {status: 0 for status in Status}
        for state in self.states:
            counts[state.status] += 1
        return counts

    def _has_notification(self, kind: NotificationKind, maintenance_type: TypeLike) -> bool:
        return any(
            n.kind == kind and n.is_about(maintenance_type) for n in self.notifications
        )

    def update_mileage(
        self, km: float, now: Optional[datetime] = None
    ) -> List[Notification]:
        """
        Record a new odometer reading and recompute every maintenance state.

        Items that end up critical get one alert each; an item that already
        has an outstanding critical alert is not alerted again. Returns the
        notifications that were added.
        """
        validate_km(km)
        now = now or datetime.now()
        if km < self.current_km:
            logger.warning(
                "%s: odometer went backwards (%s -> %s km)", self.name, self.current_km, km
            )

        self.current_km = km
        self._as_of_date = now.date().isoformat()
        self.states = [state.recompute(km) for state in self.states]
        logger.info("%s: odometer updated to %s km", self.name, km)

        added = []
        for state in self.critical_states():
            if self._has_notification(
                NotificationKind.MAINTENANCE_CRITICAL, state.maintenance_type
            ):
                continue
            added.append(critical_notification(self.short_name, state, now))
        self.notifications.extend(added)
        return added

    def _find_open_entry(self, maintenance_type: TypeLike) -> Optional[HistoryEntry]:
        open_entries = [h for h in self.get_history_for_type(maintenance_type) if h.is_open]
        if not open_entries:
            return None
        return min(open_entries, key=lambda h: h.date)

    def complete_service(
        self,
        maintenance_type: TypeLike,
        km: float,
        service_date: Optional[str] = None,
        cost: Optional[float] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        update_vehicle_mileage: bool = True,
        now: Optional[datetime] = None,
    ) -> HistoryEntry:
        """
        Record a completed service for one maintenance item.

        - The item's state is reset: due at km + interval, 100%
        - An open (pending/urgent) entry for the item becomes the completed one
        - The odometer moves forward to km when update_vehicle_mileage is set
        - Notifications about the item are replaced by a "completed" one
        """
        validate_km(km)
        validate_cost(cost)
        now = now or datetime.now()
        service_date = service_date or now.date().isoformat()
        validate_date(service_date)

        state = self.get_state(maintenance_type)
        if state is None:
            self.states.append(new_state(maintenance_type, km, now))
        else:
            self._replace_state(complete_service(state, km, now))

        entry = self._find_open_entry(maintenance_type)
        if entry is not None:
            entry.scheduled_date = entry.date
            entry.status = COMPLETED
            entry.date = service_date
            entry.mileage = km
            entry.cost = cost if cost is not None else entry.cost
            entry.location = location or entry.location
            entry.notes = notes or entry.notes
        else:
            entry = HistoryEntry(
                maintenance_type=maintenance_type,
                date=service_date,
                mileage=km,
                status=COMPLETED,
                cost=cost,
                location=location,
                notes=notes,
            )
            self.history.append(entry)

        if update_vehicle_mileage and km > self.current_km:
            self.current_km = km
            self._as_of_date = now.date().isoformat()
            key = type_key(maintenance_type)
            self.states = [
                s if type_key(s.maintenance_type) == key else s.recompute(km)
                for s in self.states
            ]

        self.notifications = [
            n for n in self.notifications if not n.is_about(maintenance_type)
        ]
        self.notifications.append(
            completed_notification(self.short_name, maintenance_type, now)
        )
        logger.info(
            "%s: %s completed at %s km", self.name, display_name(maintenance_type), km
        )
        return entry

    def schedule_service(
        self,
        maintenance_type: TypeLike,
        km: float,
        service_date: Optional[str] = None,
        cost: Optional[float] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> HistoryEntry:
        """
        Schedule a future service.

        Status is "urgent" when fewer than URGENT_WITHIN_KM remain or the
        date has already passed, otherwise "pending".
        """
        validate_km(km)
        validate_cost(cost)
        remaining = km - self.current_km
        if remaining <= 0:
            raise ValidationError("Error: scheduled mileage must be above the current reading")
        if remaining > MAX_SCHEDULE_AHEAD_KM:
            raise ValidationError(
                f"Error: scheduled mileage must be within {MAX_SCHEDULE_AHEAD_KM:,} km"
            )

        now = now or datetime.now()
        if service_date is None:
            service_date = (now.date() + timedelta(days=DEFAULT_SCHEDULE_DAYS)).isoformat()
        validate_date(service_date)

        urgent = remaining < URGENT_WITHIN_KM or date.fromisoformat(service_date) < now.date()
        entry = HistoryEntry(
            maintenance_type=maintenance_type,
            date=service_date,
            mileage=km,
            status=URGENT if urgent else PENDING,
            cost=cost,
            location=location,
            notes=notes,
        )
        self.history.append(entry)
        self.notifications.append(
            scheduled_notification(self.short_name, maintenance_type, km, urgent, now)
        )
        logger.info(
            "%s: %s scheduled at %s km (%s)",
            self.name,
            display_name(maintenance_type),
            km,
            entry.status,
        )
        return entry

    def statistics(self) -> VehicleStatistics:
        completed = [h for h in self.history if h.is_completed]
        return VehicleStatistics(
            total_completed=len(completed),
            on_time=sum(1 for h in completed if h.was_completed_on_time),
            total_cost=sum(h.cost for h in completed if h.cost is not None),
        )


def register_vehicle(
    make: str,
    model: str,
    year: int,
    vehicle_type: str,
    current_km: float,
    now: Optional[datetime] = None,
) -> Vehicle:
    """
    Create a vehicle with one fresh maintenance state per applicable item.

    Cars get air filter and alignment, motorcycles get chain and spark plug,
    on top of the common items.
    """
    validate_vehicle(make, model, year, vehicle_type, current_km)
    now = now or datetime.now()
    vehicle = Vehicle(
        make=make.strip(),
        model=model.strip(),
        year=year,
        vehicle_type=vehicle_type,
        current_km=current_km,
        states=[new_state(t, current_km, now) for t in types_for_vehicle(vehicle_type)],
        as_of_date=now.date().isoformat(),
    )
    vehicle.notifications.append(vehicle_added_notification(vehicle.short_name, now))
    logger.info("Registered %s (%s) with %d items", vehicle.name, vehicle_type, len(vehicle.states))
    return vehicle
