"""Flask JSON API for vehicle maintenance tracking."""

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from autocare import (
    Garage,
    HistoryEntry,
    MaintenanceState,
    Notification,
    Status,
    ValidationError,
    Vehicle,
    VehicleNotFoundError,
    parse_maintenance_type,
    prune_notifications,
    register_vehicle,
)
from autocare.config import Settings, configure_logging
from autocare.history_entry import ENTRY_STATUSES
from autocare.loader import slugify
from autocare.maintenance_type import display_name, type_key
from autocare.notification import sort_notifications

logger = logging.getLogger(__name__)


def state_json(state: MaintenanceState, current_km: float) -> dict:
    return {
        "type": type_key(state.maintenance_type),
        "name": state.name,
        "percentage": state.percentage,
        "status": state.status.name.lower(),
        "priority": state.priority.label,
        "dueAtKm": state.due_at_km,
        "remainingKm": state.remaining_km(current_km),
        "overdueByKm": state.is_overdue_by_km(current_km),
        "intervalKm": state.interval,
        "lastServicedAt": state.last_serviced_at.isoformat(timespec="seconds"),
        "overdueByTime": state.is_overdue_by_time(),
    }


def history_json(entry: HistoryEntry) -> dict:
    return {
        "type": entry.type_key,
        "name": entry.name,
        "date": entry.date,
        "mileage": entry.mileage,
        "status": entry.status,
        "cost": entry.cost,
        "location": entry.location,
        "notes": entry.notes,
        "scheduledDate": entry.scheduled_date,
        "overdue": entry.is_overdue(),
    }


def notification_json(notification: Notification) -> dict:
    return {
        "kind": notification.kind.value,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority.label,
        "maintenanceType": (
            type_key(notification.maintenance_type)
            if notification.maintenance_type is not None
            else None
        ),
        "createdAt": notification.created_at.isoformat(timespec="seconds"),
    }


def status_counts_json(vehicle: Vehicle) -> dict:
    return {s.name.lower(): n for s, n in vehicle.status_counts().items()}


def vehicle_summary_json(vehicle_id: str, vehicle: Vehicle) -> dict:
    last_service = vehicle.last_service
    return {
        "id": vehicle_id,
        "name": vehicle.name,
        "type": vehicle.vehicle_type,
        "currentKm": vehicle.current_km,
        "asOfDate": vehicle.as_of_date,
        "statusCounts": status_counts_json(vehicle),
        "lastService": history_json(last_service) if last_service else None,
    }


def _error(message: str, code: int):
    return jsonify({"error": message}), code


def _number(payload: dict, key: str, required: bool = True) -> Optional[float]:
    value = payload.get(key)
    if value is None or value == "":
        if required:
            raise ValidationError(f"Error: '{key}' is required")
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Error: '{key}' must be a number")


def _flag(payload: dict, key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ValidationError(f"Error: '{key}' must be true or false")
    return value


def _maintenance_type(payload: dict):
    value = payload.get("type")
    if not value:
        raise ValidationError("Error: 'type' is required")
    member = parse_maintenance_type(value)
    if member is None:
        raise ValidationError(f"Error: unknown maintenance type '{value}'")
    return member


def create_app(garage: Optional[Garage] = None, settings: Optional[Settings] = None) -> Flask:
    """Build the app around an explicit vehicle store."""
    settings = settings or Settings.from_env()
    garage = garage or Garage(settings.data_dir)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["GARAGE"] = garage

    @app.errorhandler(VehicleNotFoundError)
    def handle_not_found(e):
        return _error(e.message, 404)

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        logger.warning("Rejected request to %s: %s", request.path, e.message)
        return _error(e.message, 400)

    @app.route("/vehicles")
    def list_vehicles():
        """Dashboard data: one summary per vehicle."""
        vehicles = [
            vehicle_summary_json(vehicle_id, garage.load(vehicle_id))
            for vehicle_id in garage.list_ids()
        ]
        return jsonify({"vehicles": vehicles})

    @app.route("/vehicles", methods=["POST"])
    def create_vehicle():
        payload = request.get_json(silent=True) or {}
        try:
            year = int(payload.get("year"))
        except (TypeError, ValueError):
            raise ValidationError("Error: 'year' must be an integer")
        vehicle = register_vehicle(
            str(payload.get("make", "")),
            str(payload.get("model", "")),
            year,
            payload.get("vehicleType", "car"),
            _number(payload, "currentKm"),
        )
        vehicle_id = payload.get("id")
        if vehicle_id:
            vehicle_id = str(vehicle_id)
            if slugify(vehicle_id) != vehicle_id:
                raise ValidationError(f"Error: invalid vehicle id '{vehicle_id}'")
            garage.create(vehicle_id, vehicle)
        else:
            vehicle_id = garage.add(vehicle)
        return jsonify(vehicle_summary_json(vehicle_id, vehicle)), 201

    @app.route("/vehicles/<vehicle_id>")
    def vehicle_detail(vehicle_id: str):
        """Vehicle with every maintenance item, most urgent first."""
        vehicle = garage.load(vehicle_id)
        status_filter = request.args.get("status", "").lower() or None

        states = vehicle.states_by_urgency()
        if status_filter:
            try:
                wanted = Status[status_filter.upper()]
            except KeyError:
                raise ValidationError(f"Error: unknown status '{status_filter}'")
            states = [s for s in states if s.status == wanted]

        body = vehicle_summary_json(vehicle_id, vehicle)
        body["make"] = vehicle.make
        body["model"] = vehicle.model
        body["year"] = vehicle.year
        body["maintenance"] = [state_json(s, vehicle.current_km) for s in states]
        return jsonify(body)

    @app.route("/vehicles/<vehicle_id>", methods=["DELETE"])
    def remove_vehicle(vehicle_id: str):
        garage.delete(vehicle_id)
        return "", 204

    @app.route("/vehicles/<vehicle_id>/mileage", methods=["POST"])
    def update_mileage(vehicle_id: str):
        vehicle = garage.load(vehicle_id)
        payload = request.get_json(silent=True) or {}

        added = vehicle.update_mileage(_number(payload, "km"))
        garage.save(vehicle_id, vehicle)

        return jsonify(
            {
                "currentKm": vehicle.current_km,
                "maintenance": [
                    state_json(s, vehicle.current_km) for s in vehicle.states_by_urgency()
                ],
                "notifications": [notification_json(n) for n in added],
            }
        )

    @app.route("/vehicles/<vehicle_id>/services", methods=["POST"])
    def log_service(vehicle_id: str):
        """Record a completed service."""
        vehicle = garage.load(vehicle_id)
        payload = request.get_json(silent=True) or {}
        maintenance_type = _maintenance_type(payload)

        km = _number(payload, "km", required=False)
        entry = vehicle.complete_service(
            maintenance_type,
            km if km is not None else vehicle.current_km,
            service_date=payload.get("date") or date.today().isoformat(),
            cost=_number(payload, "cost", required=False),
            location=payload.get("location") or None,
            notes=payload.get("notes") or None,
            update_vehicle_mileage=_flag(payload, "updateVehicleMileage", True),
        )
        garage.save(vehicle_id, vehicle)
        logger.info("Logged %s for %s", display_name(maintenance_type), vehicle_id)

        state = vehicle.get_state(maintenance_type)
        return jsonify(
            {
                "entry": history_json(entry),
                "state": state_json(state, vehicle.current_km),
            }
        ), 201

    @app.route("/vehicles/<vehicle_id>/schedule", methods=["POST"])
    def schedule_service(vehicle_id: str):
        vehicle = garage.load(vehicle_id)
        payload = request.get_json(silent=True) or {}

        entry = vehicle.schedule_service(
            _maintenance_type(payload),
            _number(payload, "km"),
            service_date=payload.get("date") or None,
            cost=_number(payload, "cost", required=False),
            location=payload.get("location") or None,
            notes=payload.get("notes") or None,
        )
        garage.save(vehicle_id, vehicle)
        return jsonify({"entry": history_json(entry)}), 201

    @app.route("/vehicles/<vehicle_id>/history")
    def vehicle_history(vehicle_id: str):
        """Vehicle maintenance history, newest first."""
        vehicle = garage.load(vehicle_id)
        history = vehicle.get_history_sorted(sort_by="date", reverse=True)

        status_filter = request.args.get("status")
        if status_filter:
            if status_filter not in ENTRY_STATUSES:
                raise ValidationError(f"Error: unknown status '{status_filter}'")
            history = [h for h in history if h.status == status_filter]

        stats = vehicle.statistics()
        return jsonify(
            {
                "history": [history_json(h) for h in history],
                "statistics": {
                    "totalCompleted": stats.total_completed,
                    "onTime": stats.on_time,
                    "onTimePercentage": stats.on_time_percentage,
                    "totalCost": stats.total_cost,
                },
            }
        )

    @app.route("/vehicles/<vehicle_id>/notifications")
    def vehicle_notifications(vehicle_id: str):
        vehicle = garage.load(vehicle_id)
        notifications = prune_notifications(
            vehicle.notifications, settings.notification_max_age_days
        )
        return jsonify(
            {"notifications": [notification_json(n) for n in sort_notifications(notifications)]}
        )

    return app


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    env_settings = Settings.from_env()
    configure_logging(env_settings.log_level)
    create_app(settings=env_settings).run(debug=True, host="0.0.0.0", port=5001)
