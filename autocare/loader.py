"""YAML loading and saving utilities for vehicle data."""

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ValidationError, VehicleNotFoundError
from .history_entry import COMPLETED, HistoryEntry
from .maintenance_state import MaintenanceState
from .maintenance_type import TypeLike, parse_maintenance_type, type_key
from .notification import Notification, NotificationKind
from .status import Priority
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def _to_datetime(value: Union[str, date, datetime]) -> datetime:
    """SafeLoader turns unquoted timestamps into date/datetime objects."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(value)


def _to_date_str(value: Union[str, date, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _parse_type(value: str) -> TypeLike:
    """Enum member for known identifiers, raw string for retired ones."""
    return parse_maintenance_type(value) or value


def _parse_state(dct: Dict[str, Any]) -> MaintenanceState:
    return MaintenanceState(
        maintenance_type=_parse_type(dct["type"]),
        last_serviced_at=_to_datetime(dct["lastServicedAt"]),
        due_at_km=dct["dueAtKm"],
        percentage=dct.get("percentage", 100),
    )


def _parse_history_entry(dct: Dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        _parse_type(dct["type"]),
        _to_date_str(dct["date"]),
        dct["mileage"],
        dct.get("status", COMPLETED),
        dct.get("cost"),
        dct.get("location"),
        dct.get("notes"),
        _to_date_str(dct.get("scheduledDate")),
    )


def _parse_notification(dct: Dict[str, Any]) -> Notification:
    maintenance_type = dct.get("maintenanceType")
    return Notification(
        kind=NotificationKind(dct["kind"]),
        title=dct["title"],
        message=dct["message"],
        priority=Priority.from_label(dct["priority"]),
        maintenance_type=_parse_type(maintenance_type) if maintenance_type else None,
        created_at=_to_datetime(dct["createdAt"]),
    )


def parse_vehicle(data: Dict[str, Any]) -> Vehicle:
    """Build a Vehicle from the raw YAML structure."""
    car = data["vehicle"]
    state = data.get("state") or {}
    return Vehicle(
        make=car["make"],
        model=car["model"],
        year=car["year"],
        vehicle_type=car["type"],
        current_km=state.get("currentKm", 0),
        states=[_parse_state(s) for s in data.get("maintenance") or []],
        history=[_parse_history_entry(h) for h in data.get("history") or []],
        notifications=[_parse_notification(n) for n in data.get("notifications") or []],
        as_of_date=_to_date_str(state.get("asOfDate")),
    )


def _state_to_dict(state: MaintenanceState) -> Dict[str, Any]:
    return {
        "type": type_key(state.maintenance_type),
        "lastServicedAt": state.last_serviced_at.isoformat(timespec="seconds"),
        "dueAtKm": state.due_at_km,
        "percentage": state.percentage,
    }


def _history_entry_to_dict(entry: HistoryEntry) -> Dict[str, Any]:
    """Serialize a HistoryEntry, omitting None values for cleaner YAML."""
    d: Dict[str, Any] = {
        "type": entry.type_key,
        "date": entry.date,
        "mileage": entry.mileage,
        "status": entry.status,
    }
    if entry.cost is not None:
        d["cost"] = entry.cost
    if entry.location is not None:
        d["location"] = entry.location
    if entry.notes is not None:
        d["notes"] = entry.notes
    if entry.scheduled_date is not None:
        d["scheduledDate"] = entry.scheduled_date
    return d


def _notification_to_dict(notification: Notification) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "kind": notification.kind.value,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority.label,
    }
    if notification.maintenance_type is not None:
        d["maintenanceType"] = type_key(notification.maintenance_type)
    d["createdAt"] = notification.created_at.isoformat(timespec="seconds")
    return d


def vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the YAML dict format (camelCase keys)."""
    return {
        "vehicle": {
            "make": vehicle.make,
            "model": vehicle.model,
            "year": vehicle.year,
            "type": vehicle.vehicle_type,
        },
        "state": {
            "currentKm": vehicle.current_km,
            "asOfDate": vehicle.as_of_date,
        },
        "maintenance": [_state_to_dict(s) for s in vehicle.states],
        "history": [_history_entry_to_dict(h) for h in vehicle.history],
        "notifications": [_notification_to_dict(n) for n in vehicle.notifications],
    }


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """Load a vehicle from a YAML file."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    return parse_vehicle(data)


def save_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """Write the whole vehicle record back to its YAML file."""
    with open(filename, "w") as fp:
        yaml.dump(
            vehicle_to_dict(vehicle),
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def delete_vehicle(filename: Union[str, Path]) -> None:
    """Remove a vehicle YAML file from disk."""
    Path(filename).unlink()


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class Garage:
    """
    Directory of vehicle YAML files, one per vehicle ID.

    This is the storage handle passed to the CLI and the web app; nothing
    else reads or writes vehicle files.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, vehicle_id: str) -> Path:
        return self.directory / f"{vehicle_id}.yaml"

    def exists(self, vehicle_id: str) -> bool:
        return self.path_for(vehicle_id).exists()

    def list_ids(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.yaml"))

    def load(self, vehicle_id: str) -> Vehicle:
        path = self.path_for(vehicle_id)
        if not path.exists():
            raise VehicleNotFoundError(vehicle_id)
        return load_vehicle(path)

    def save(self, vehicle_id: str, vehicle: Vehicle) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        save_vehicle(self.path_for(vehicle_id), vehicle)
        logger.debug("Saved %s to %s", vehicle.name, self.path_for(vehicle_id))

    def add(self, vehicle: Vehicle) -> str:
        """Store a new vehicle under a fresh ID derived from its name."""
        base = slugify(f"{vehicle.make} {vehicle.model} {vehicle.year}") or "vehicle"
        vehicle_id = base
        counter = 2
        while self.exists(vehicle_id):
            vehicle_id = f"{base}-{counter}"
            counter += 1
        self.save(vehicle_id, vehicle)
        return vehicle_id

    def create(self, vehicle_id: str, vehicle: Vehicle) -> None:
        if self.exists(vehicle_id):
            raise ValidationError(f"Error: vehicle '{vehicle_id}' already exists")
        self.save(vehicle_id, vehicle)

    def delete(self, vehicle_id: str) -> None:
        path = self.path_for(vehicle_id)
        if not path.exists():
            raise VehicleNotFoundError(vehicle_id)
        delete_vehicle(path)
        logger.info("Deleted vehicle %s", vehicle_id)
