#!/usr/bin/env python3
"""Tests for the maintenance type interval table."""

from dateutil.relativedelta import relativedelta

from autocare import DEFAULT_INTERVAL_KM, MaintenanceType, display_name, interval_for
from autocare.maintenance_type import (
    frequency_text,
    parse_maintenance_type,
    time_limit_for,
    type_key,
    types_for_vehicle,
)


class TestIntervalFor:
    """Tests for interval_for lookups."""

    def test_known_types(self):
        assert interval_for(MaintenanceType.OIL) == 5000
        assert interval_for(MaintenanceType.TIRES) == 40000
        assert interval_for(MaintenanceType.BRAKES) == 30000
        assert interval_for(MaintenanceType.BATTERY) == 50000
        assert interval_for(MaintenanceType.COOLANT) == 20000
        assert interval_for(MaintenanceType.AIR_FILTER) == 17500
        assert interval_for(MaintenanceType.ALIGNMENT) == 10000
        assert interval_for(MaintenanceType.CHAIN) == 22500
        assert interval_for(MaintenanceType.SPARK_PLUG) == 11000

    def test_accepts_stored_identifiers(self):
        assert interval_for("oil") == 5000
        assert interval_for("airFilter") == 17500
        assert interval_for("sparkPlug") == 11000

    def test_unknown_type_uses_default(self):
        assert interval_for("foo") == 10000
        assert DEFAULT_INTERVAL_KM == 10000

    def test_identifiers_are_case_sensitive(self):
        """Only the exact stored identifier is recognized."""
        assert interval_for("Oil") == DEFAULT_INTERVAL_KM

    def test_every_type_has_interval(self):
        for t in MaintenanceType:
            assert interval_for(t) > 0


class TestParseAndNames:
    """Tests for parse_maintenance_type and display names."""

    def test_parse_known(self):
        assert parse_maintenance_type("chain") == MaintenanceType.CHAIN
        assert parse_maintenance_type(MaintenanceType.CHAIN) == MaintenanceType.CHAIN

    def test_parse_unknown_returns_none(self):
        assert parse_maintenance_type("transmission") is None

    def test_display_name(self):
        assert display_name(MaintenanceType.OIL) == "Engine Oil"
        assert display_name("airFilter") == "Air Filter"

    def test_unknown_display_name_is_identifier(self):
        assert display_name("transmission") == "transmission"

    def test_type_key(self):
        assert type_key(MaintenanceType.SPARK_PLUG) == "sparkPlug"
        assert type_key("retired") == "retired"

    def test_frequency_text(self):
        assert frequency_text("oil") == "Every 5,000 km"
        assert frequency_text("airFilter") == "Every 17,500 km"


class TestTypesForVehicle:
    """Tests for per-vehicle-type item sets."""

    def test_car(self):
        types = types_for_vehicle("car")
        assert MaintenanceType.AIR_FILTER in types
        assert MaintenanceType.ALIGNMENT in types
        assert MaintenanceType.CHAIN not in types
        assert len(types) == 7

    def test_motorcycle(self):
        types = types_for_vehicle("motorcycle")
        assert MaintenanceType.CHAIN in types
        assert MaintenanceType.SPARK_PLUG in types
        assert MaintenanceType.AIR_FILTER not in types
        assert len(types) == 7

    def test_common_items_in_both(self):
        for t in ("oil", "tires", "brakes", "battery", "coolant"):
            member = MaintenanceType(t)
            assert member in types_for_vehicle("car")
            assert member in types_for_vehicle("motorcycle")


class TestTimeLimits:
    """Tests for time_limit_for."""

    def test_limits(self):
        assert time_limit_for("oil") == relativedelta(years=1)
        assert time_limit_for("battery") == relativedelta(years=3)
        assert time_limit_for("coolant") == relativedelta(years=2)

    def test_no_limit(self):
        assert time_limit_for("tires") is None
        assert time_limit_for("unknown") is None
