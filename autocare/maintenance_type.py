"""MaintenanceType enum and the interval table keyed by it."""

from enum import Enum
from typing import Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

DEFAULT_INTERVAL_KM = 10000


class MaintenanceType(Enum):
    """Maintenance items tracked per vehicle. Values are the stored identifiers."""

    OIL = "oil"
    TIRES = "tires"
    BRAKES = "brakes"
    BATTERY = "battery"
    COOLANT = "coolant"
    AIR_FILTER = "airFilter"
    ALIGNMENT = "alignment"
    CHAIN = "chain"
    SPARK_PLUG = "sparkPlug"


# Stored data may still reference retired identifiers, so lookups accept raw strings
TypeLike = Union[MaintenanceType, str]

INTERVALS_KM: Dict[MaintenanceType, int] = {
    MaintenanceType.OIL: 5000,
    MaintenanceType.TIRES: 40000,
    MaintenanceType.BRAKES: 30000,
    MaintenanceType.BATTERY: 50000,
    MaintenanceType.COOLANT: 20000,
    MaintenanceType.AIR_FILTER: 17500,
    MaintenanceType.ALIGNMENT: 10000,
    MaintenanceType.CHAIN: 22500,
    MaintenanceType.SPARK_PLUG: 11000,
}

DISPLAY_NAMES: Dict[MaintenanceType, str] = {
    MaintenanceType.OIL: "Engine Oil",
    MaintenanceType.TIRES: "Tires",
    MaintenanceType.BRAKES: "Brakes",
    MaintenanceType.BATTERY: "Battery",
    MaintenanceType.COOLANT: "Coolant",
    MaintenanceType.AIR_FILTER: "Air Filter",
    MaintenanceType.ALIGNMENT: "Alignment & Balancing",
    MaintenanceType.CHAIN: "Chain / Drive Kit",
    MaintenanceType.SPARK_PLUG: "Spark Plug",
}

# Items that also expire by age, regardless of distance
TIME_LIMITS: Dict[MaintenanceType, relativedelta] = {
    MaintenanceType.OIL: relativedelta(years=1),
    MaintenanceType.BATTERY: relativedelta(years=3),
    MaintenanceType.COOLANT: relativedelta(years=2),
}

COMMON_TYPES = [
    MaintenanceType.OIL,
    MaintenanceType.TIRES,
    MaintenanceType.BRAKES,
    MaintenanceType.BATTERY,
    MaintenanceType.COOLANT,
]
CAR_TYPES = COMMON_TYPES + [MaintenanceType.AIR_FILTER, MaintenanceType.ALIGNMENT]
MOTORCYCLE_TYPES = COMMON_TYPES + [MaintenanceType.CHAIN, MaintenanceType.SPARK_PLUG]

VEHICLE_TYPES = ("car", "motorcycle")


def parse_maintenance_type(value: TypeLike) -> Optional[MaintenanceType]:
    """Return the enum member for an identifier, or None if it is not known."""
    if isinstance(value, MaintenanceType):
        return value
    try:
        return MaintenanceType(value)
    except ValueError:
        return None


def interval_for(maintenance_type: TypeLike) -> int:
    """
    Recommended service interval in km.

    Unknown identifiers fall back to DEFAULT_INTERVAL_KM instead of raising.
    """
    member = parse_maintenance_type(maintenance_type)
    if member is None:
        return DEFAULT_INTERVAL_KM
    return INTERVALS_KM[member]


def display_name(maintenance_type: TypeLike) -> str:
    member = parse_maintenance_type(maintenance_type)
    if member is None:
        return str(maintenance_type)
    return DISPLAY_NAMES[member]


def type_key(maintenance_type: TypeLike) -> str:
    """Stored identifier for an enum member or raw string."""
    if isinstance(maintenance_type, MaintenanceType):
        return maintenance_type.value
    return maintenance_type


def time_limit_for(maintenance_type: TypeLike) -> Optional[relativedelta]:
    member = parse_maintenance_type(maintenance_type)
    if member is None:
        return None
    return TIME_LIMITS.get(member)


def types_for_vehicle(vehicle_type: str) -> List[MaintenanceType]:
    """Maintenance items created when a vehicle of this kind is registered."""
    if vehicle_type == "car":
        return list(CAR_TYPES)
    if vehicle_type == "motorcycle":
        return list(MOTORCYCLE_TYPES)
    return list(COMMON_TYPES)


def frequency_text(maintenance_type: TypeLike) -> str:
    """Human-readable interval, e.g. 'Every 5,000 km'."""
    return f"Every {interval_for(maintenance_type):,} km"
