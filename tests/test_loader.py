#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""
from datetime import datetime

import pytest
import yaml

from autocare import (
    Garage,
    HistoryEntry,
    MaintenanceType,
    NotificationKind,
    Priority,
    ValidationError,
    Vehicle,
    VehicleNotFoundError,
    load_vehicle,
    register_vehicle,
    save_vehicle,
)
from autocare.loader import delete_vehicle, slugify

NOW = datetime(2025, 6, 1, 12, 0)

MINIMAL_YAML = """
vehicle:
  make: Toyota
  model: Corolla
  year: 2019
  type: car

state:
  currentKm: 44000
  asOfDate: '2025-06-01'

maintenance:
  - type: oil
    lastServicedAt: '2025-01-15T09:30:00'
    dueAtKm: 45000
    percentage: 20
"""

# =============================================================================
# load_vehicle tests
# =============================================================================


class TestLoadVehicle:
    """Tests for load_vehicle function."""

    def test_loads_minimal_vehicle(self, tmp_path):
        """Load a minimal valid vehicle file."""
        yaml_file = tmp_path / "corolla.yaml"
        yaml_file.write_text(MINIMAL_YAML)

        vehicle = load_vehicle(yaml_file)

        assert isinstance(vehicle, Vehicle)
        assert vehicle.make == "Toyota"
        assert vehicle.year == 2019
        assert vehicle.vehicle_type == "car"
        assert vehicle.current_km == 44000
        assert vehicle.as_of_date == "2025-06-01"
        assert len(vehicle.states) == 1
        oil = vehicle.states[0]
        assert oil.maintenance_type == MaintenanceType.OIL
        assert oil.last_serviced_at == datetime(2025, 1, 15, 9, 30)
        assert oil.due_at_km == 45000
        assert oil.percentage == 20
        assert vehicle.history == []
        assert vehicle.notifications == []

    def test_unquoted_dates(self, tmp_path):
        """SafeLoader date/datetime objects are accepted."""
        yaml_file = tmp_path / "corolla.yaml"
        yaml_file.write_text("""
vehicle: {make: Toyota, model: Corolla, year: 2019, type: car}
state: {currentKm: 1000, asOfDate: 2025-06-01}
maintenance:
  - {type: tires, lastServicedAt: 2025-01-15, dueAtKm: 41000}
history:
  - {type: tires, date: 2025-01-15, mileage: 1000}
""")
        vehicle = load_vehicle(yaml_file)
        assert vehicle.as_of_date == "2025-06-01"
        assert vehicle.states[0].last_serviced_at == datetime(2025, 1, 15)
        assert vehicle.states[0].percentage == 100
        assert vehicle.history[0].date == "2025-01-15"
        assert vehicle.history[0].status == "completed"

    def test_retired_type_kept_as_string(self, tmp_path):
        yaml_file = tmp_path / "old.yaml"
        yaml_file.write_text(MINIMAL_YAML.replace("type: oil", "type: transmission"))
        vehicle = load_vehicle(yaml_file)
        state = vehicle.states[0]
        assert state.maintenance_type == "transmission"
        assert state.interval == 10000

    def test_missing_state_defaults(self, tmp_path):
        yaml_file = tmp_path / "bare.yaml"
        yaml_file.write_text("""
vehicle: {make: Toyota, model: Corolla, year: 2019, type: car}
maintenance: []
""")
        vehicle = load_vehicle(yaml_file)
        assert vehicle.current_km == 0
        assert vehicle.states == []


# =============================================================================
# save_vehicle tests
# =============================================================================


class TestSaveVehicle:
    """Tests for save_vehicle function."""

    def test_round_trip_registered_vehicle(self, tmp_path):
        path = tmp_path / "corolla.yaml"
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        vehicle.update_mileage(44000, now=NOW)
        vehicle.schedule_service(MaintenanceType.BRAKES, 45000, service_date="2025-07-01", now=NOW)
        vehicle.complete_service(MaintenanceType.TIRES, 44000, cost=280.0, location="Tire Plus", now=NOW)

        save_vehicle(path, vehicle)
        loaded = load_vehicle(path)

        assert loaded.current_km == 44000
        assert loaded.states == vehicle.states
        assert [h.status for h in loaded.history] == ["pending", "completed"]
        assert loaded.history[1].cost == 280.0
        assert loaded.history[1].location == "Tire Plus"
        assert loaded.notifications == vehicle.notifications

    def test_writes_camel_case_keys(self, tmp_path):
        path = tmp_path / "corolla.yaml"
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        save_vehicle(path, vehicle)

        data = yaml.safe_load(path.read_text())
        assert list(data.keys()) == ["vehicle", "state", "maintenance", "history", "notifications"]
        assert data["state"]["currentKm"] == 40000
        assert data["maintenance"][0]["dueAtKm"] == 45000
        assert data["maintenance"][0]["lastServicedAt"] == "2025-06-01T12:00:00"
        assert data["notifications"][0]["kind"] == "vehicle_added"
        assert data["notifications"][0]["priority"] == "medium"
        assert "maintenanceType" not in data["notifications"][0]

    def test_omits_none_history_fields(self, tmp_path):
        path = tmp_path / "corolla.yaml"
        vehicle = Vehicle(
            "Toyota", "Corolla", 2019, "car", 1000,
            history=[HistoryEntry("oil", "2025-01-15", 1000)],
        )
        save_vehicle(path, vehicle)
        data = yaml.safe_load(path.read_text())
        assert data["history"][0] == {
            "type": "oil",
            "date": "2025-01-15",
            "mileage": 1000,
            "status": "completed",
        }

    def test_notification_fields_round_trip(self, tmp_path):
        path = tmp_path / "corolla.yaml"
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        vehicle.update_mileage(44000, now=NOW)
        save_vehicle(path, vehicle)

        critical = load_vehicle(path).notifications[-1]
        assert critical.kind == NotificationKind.MAINTENANCE_CRITICAL
        assert critical.priority == Priority.HIGH
        assert critical.maintenance_type == MaintenanceType.OIL
        assert critical.created_at == NOW


class TestDeleteVehicle:
    def test_removes_file(self, tmp_path):
        path = tmp_path / "corolla.yaml"
        path.write_text(MINIMAL_YAML)
        delete_vehicle(path)
        assert not path.exists()


# =============================================================================
# Garage tests
# =============================================================================


class TestGarage:
    """Tests for the Garage file store."""

    def test_list_ids_empty_when_missing(self, tmp_path):
        assert Garage(tmp_path / "missing").list_ids() == []

    def test_add_load_and_list(self, tmp_path):
        garage = Garage(tmp_path / "vehicles")
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        vehicle_id = garage.add(vehicle)
        assert vehicle_id == "toyota-corolla-2019"
        assert garage.list_ids() == ["toyota-corolla-2019"]
        assert garage.load(vehicle_id).current_km == 40000

    def test_add_avoids_collisions(self, tmp_path):
        garage = Garage(tmp_path)
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        assert garage.add(vehicle) == "toyota-corolla-2019"
        assert garage.add(vehicle) == "toyota-corolla-2019-2"

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(VehicleNotFoundError):
            Garage(tmp_path).load("nope")

    def test_create_existing_raises(self, tmp_path):
        garage = Garage(tmp_path)
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        garage.create("corolla", vehicle)
        with pytest.raises(ValidationError):
            garage.create("corolla", vehicle)

    def test_delete(self, tmp_path):
        garage = Garage(tmp_path)
        vehicle = register_vehicle("Toyota", "Corolla", 2019, "car", 40000, now=NOW)
        garage.create("corolla", vehicle)
        garage.delete("corolla")
        assert not garage.exists("corolla")
        with pytest.raises(VehicleNotFoundError):
            garage.delete("corolla")


class TestSlugify:
    def test_slugify(self):
        assert slugify("Yamaha MT-07 2021") == "yamaha-mt-07-2021"
        assert slugify("  Alfa Romeo  Giulia ") == "alfa-romeo-giulia"
