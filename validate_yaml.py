#!/usr/bin/env python3
"""Validate vehicle YAML files against the schema and the maintenance tables."""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import Draft7Validator

from autocare.calculations import calc_percentage
from autocare.config import Settings, configure_logging
from autocare.maintenance_type import interval_for, parse_maintenance_type, types_for_vehicle

logger = logging.getLogger("validate_yaml")


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def schema_errors(data, schema: dict) -> List[str]:
    """Every schema violation, ordered by location in the document."""
    errors = []
    validator = Draft7Validator(schema)
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
        errors.append(f"Schema validation error: {error.message}")
        if error.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in error.path)}")
    return errors


def consistency_errors(data: dict) -> List[str]:
    """
    Checks the schema cannot express.

    - each maintenance item appears once
    - stored percentages match the odometer reading, unless the item was
      just serviced (100%)
    Items from retired identifiers or another vehicle type are logged only.
    """
    errors = []
    vehicle_type = data["vehicle"]["type"]
    current_km = (data.get("state") or {}).get("currentKm", 0)
    expected = {t.value for t in types_for_vehicle(vehicle_type)}

    seen = set()
    for item in data.get("maintenance") or []:
        key = item["type"]
        if key in seen:
            errors.append(f"Duplicate maintenance item: {key}")
        seen.add(key)

        if parse_maintenance_type(key) is None:
            logger.warning("Unknown maintenance type '%s', using default interval", key)
        elif key not in expected:
            logger.warning("'%s' is not normally tracked on a %s", key, vehicle_type)

        if "percentage" not in item:
            continue
        interval = interval_for(key)
        # Reset to 100 by a service logged at or below the current reading
        if item["percentage"] == 100 and item["dueAtKm"] - interval <= current_km:
            continue
        computed = calc_percentage(current_km, item["dueAtKm"], interval)
        if computed != item["percentage"]:
            errors.append(
                f"Stale percentage for {key}: stored {item['percentage']}, "
                f"expected {computed} at {current_km:,} km"
            )
    return errors


def validate_vehicle_file(filepath: Path, schema: dict) -> List[str]:
    """Validate a single vehicle YAML file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    errors = schema_errors(data, schema)
    if errors:
        return errors
    return consistency_errors(data)


def main(vehicles_dir: Optional[Path] = None):
    """Validate all vehicle YAML files in the data directory."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    schema = load_schema()
    vehicles_dir = vehicles_dir or settings.data_dir

    if not vehicles_dir.exists():
        print(f"Error: vehicles directory not found: {vehicles_dir}")
        return 1

    yaml_files = list(vehicles_dir.glob("*.yaml")) + list(vehicles_dir.glob("*.yml"))

    if not yaml_files:
        print(f"Warning: No YAML files found in {vehicles_dir}")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_vehicle_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
