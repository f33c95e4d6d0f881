"""
Vehicle maintenance health tracking.

This package turns odometer readings into per-item maintenance health:
- MaintenanceType: Closed set of items and their service intervals
- calc_percentage / check_status: Remaining-life percentage and its tier
- MaintenanceState: Immutable per-item state, reset by complete_service
- HistoryEntry: Completed and scheduled services
- Notification: Alerts derived from state changes
- Vehicle: Main aggregate combining all data
- Garage: YAML file store for vehicles
"""

from .status import Status, Priority
from .errors import (
    InvalidIntervalError,
    OutOfRangePercentageError,
    ValidationError,
    VehicleNotFoundError,
)
from .maintenance_type import (
    DEFAULT_INTERVAL_KM,
    MaintenanceType,
    display_name,
    interval_for,
    parse_maintenance_type,
    types_for_vehicle,
)
from .calculations import (
    calc_due_km,
    calc_percentage,
    calc_remaining_km,
    check_status,
    needs_notification,
    priority_for,
)
from .maintenance_state import MaintenanceState, complete_service, new_state
from .history_entry import HistoryEntry
from .notification import Notification, NotificationKind, prune_notifications
from .vehicle import Vehicle, VehicleStatistics, register_vehicle
from .loader import Garage, load_vehicle, save_vehicle

__all__ = [
    "Status",
    "Priority",
    "InvalidIntervalError",
    "OutOfRangePercentageError",
    "ValidationError",
    "VehicleNotFoundError",
    "DEFAULT_INTERVAL_KM",
    "MaintenanceType",
    "display_name",
    "interval_for",
    "parse_maintenance_type",
    "types_for_vehicle",
    "calc_due_km",
    "calc_percentage",
    "calc_remaining_km",
    "check_status",
    "needs_notification",
    "priority_for",
    "MaintenanceState",
    "complete_service",
    "new_state",
    "HistoryEntry",
    "Notification",
    "NotificationKind",
    "prune_notifications",
    "Vehicle",
    "VehicleStatistics",
    "register_vehicle",
    "Garage",
    "load_vehicle",
    "save_vehicle",
]
