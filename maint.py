#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance tracking.

Commands:
  register      - Create a vehicle file with fresh maintenance states
  status        - Show the health of every maintenance item
  history       - View service history
  log           - Record a completed service
  schedule      - Schedule a future service
  update-km     - Update the odometer and recompute every item
  notifications - List alerts for the vehicle
  types         - List maintenance items and their intervals
"""

import argparse
import logging
import sys
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from autocare import (
    HistoryEntry,
    MaintenanceState,
    MaintenanceType,
    Notification,
    Status,
    load_vehicle,
    parse_maintenance_type,
    prune_notifications,
    register_vehicle,
    save_vehicle,
)
from autocare.config import Settings, configure_logging
from autocare.history_entry import ENTRY_STATUSES
from autocare.maintenance_type import display_name, frequency_text, interval_for, type_key
from autocare.notification import sort_notifications

logger = logging.getLogger("maint")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_percentage(percentage: int) -> str:
    """Percentage with a 10-cell bar, e.g. '######----  60%'."""
    filled = percentage // 10
    return f"{'#' * filled}{'-' * (10 - filled)} {percentage:>3}%"


def format_remaining(state: MaintenanceState, current_km: float) -> str:
    """Format remaining km; overdue items show a negative value."""
    remaining = state.remaining_km(current_km)
    if remaining < 0:
        return f"-{abs(remaining):,.0f}"
    return f"{remaining:,.0f}"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


STATUS_LABELS = {
    Status.CRITICAL: "CRITICAL",
    Status.UPCOMING: "UPCOMING",
    Status.GOOD: "GOOD",
    Status.EXCELLENT: "EXCELLENT",
}

# =============================================================================
# Status command
# =============================================================================


def make_status_table(states: List[MaintenanceState], current_km: float) -> List[List[str]]:
    """Convert maintenance states to table rows."""
    rows = []
    for state in states:
        rows.append(
            [
                state.name,
                format_percentage(state.percentage),
                STATUS_LABELS[state.status],
                state.priority.label,
                format_km(state.due_at_km),
                format_remaining(state, current_km),
                state.last_serviced_at.date().isoformat(),
            ]
        )
    return rows


def cmd_status(args):
    """Show the health of every maintenance item, most urgent first."""
    vehicle = load_vehicle(args.vehicle_file)

    print(f"Vehicle: {vehicle.name} ({vehicle.vehicle_type})")
    print(f"Current km: {vehicle.current_km:,.0f} (as of {vehicle.as_of_date})")
    counts = vehicle.status_counts()
    print(
        "Summary: "
        + ", ".join(f"{STATUS_LABELS[s].lower()} {counts[s]}" for s in Status)
    )
    print()

    states = vehicle.states_by_urgency()
    if args.critical_only:
        states = [s for s in states if s.status == Status.CRITICAL]

    if not states:
        print("No maintenance items to show.")
        return 0

    headers = ["Item", "Health", "Status", "Priority", "Due (km)", "Remaining (km)", "Last Done"]
    print(tabulate(make_status_table(states, vehicle.current_km), headers=headers, tablefmt="simple"))

    overdue_by_km = [s for s in states if s.is_overdue_by_km(vehicle.current_km)]
    if overdue_by_km:
        print()
        print("OVERDUE BY KM:")
        for state in overdue_by_km:
            print(f"  {state.name} (due at {format_km(state.due_at_km)} km)")

    overdue_by_time = vehicle.overdue_by_time()
    if overdue_by_time:
        print()
        print("OVERDUE BY TIME:")
        for state in overdue_by_time:
            print(f"  {state.name} (last done {state.last_serviced_at.date().isoformat()})")

    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(entries: List[HistoryEntry]) -> List[List[str]]:
    """Convert history entries to table rows."""
    rows = []
    for entry in entries:
        rows.append(
            [
                entry.date,
                format_km(entry.mileage),
                entry.name,
                f"{entry.status} (overdue)" if entry.is_overdue() else entry.status,
                format_cost(entry.cost),
                entry.location or "-",
                truncate(entry.notes),
            ]
        )
    return rows


def cmd_history(args):
    """View service history."""
    vehicle = load_vehicle(args.vehicle_file)

    entries = vehicle.get_history_sorted(sort_by=args.sort, reverse=not args.asc)

    # Apply filters
    if args.type:
        entries = [e for e in entries if args.type.lower() in e.type_key.lower()]

    if args.since:
        entries = [e for e in entries if e.date >= args.since]

    if args.status:
        entries = [e for e in entries if e.status == args.status]

    stats = vehicle.statistics()
    last_svc = vehicle.last_service

    print(f"Vehicle: {vehicle.name}")
    print(f"Current km: {vehicle.current_km:,.0f} (as of {vehicle.as_of_date})")
    if last_svc:
        print(f"Last service: {last_svc.date} @ {last_svc.mileage:,.0f} km ({last_svc.name})")
    print(f"Completed services: {stats.total_completed} ({stats.on_time} on time)")
    if args.type or args.since or args.status:
        print(f"Showing: {len(entries)} (filtered)")
    if stats.total_cost > 0:
        print(f"Total cost: ${stats.total_cost:,.2f}")
    print()

    if not entries:
        print("No history entries found.")
        return 0

    headers = ["Date", "Km", "Item", "Status", "Cost", "Location", "Notes"]
    print(tabulate(make_history_table(entries), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Log / schedule commands
# =============================================================================


def resolve_type(value: str) -> Optional[MaintenanceType]:
    """Match a maintenance type identifier case-insensitively."""
    member = parse_maintenance_type(value)
    if member is not None:
        return member
    for t in MaintenanceType:
        if t.value.lower() == value.lower():
            return t
    return None


def print_unknown_type(value: str) -> None:
    print(f"Error: Unknown maintenance type '{value}'")
    print("\nAvailable types:")
    for t in MaintenanceType:
        print(f"  {t.value:<10} {display_name(t)}")


def cmd_log(args):
    """Record a completed service."""
    vehicle = load_vehicle(args.vehicle_file)

    maintenance_type = resolve_type(args.maintenance_type)
    if maintenance_type is None:
        print_unknown_type(args.maintenance_type)
        return 1

    km = args.km if args.km is not None else vehicle.current_km

    print(f"Logging service for {vehicle.name}:")
    print(f"  Item:     {display_name(maintenance_type)}")
    print(f"  Km:       {km:,.0f}")
    print(f"  Next due: {km + interval_for(maintenance_type):,.0f} km")
    if args.date:
        print(f"  Date:     {args.date}")
    if args.location:
        print(f"  Location: {args.location}")
    if args.notes:
        print(f"  Notes:    {args.notes}")
    if args.cost is not None:
        print(f"  Cost:     {format_cost(args.cost)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    vehicle.complete_service(
        maintenance_type,
        km,
        service_date=args.date,
        cost=args.cost,
        location=args.location,
        notes=args.notes,
        update_vehicle_mileage=not args.keep_km,
    )
    save_vehicle(args.vehicle_file, vehicle)
    print("Service saved.")

    return 0


def cmd_schedule(args):
    """Schedule a future service."""
    vehicle = load_vehicle(args.vehicle_file)

    maintenance_type = resolve_type(args.maintenance_type)
    if maintenance_type is None:
        print_unknown_type(args.maintenance_type)
        return 1

    entry = vehicle.schedule_service(
        maintenance_type,
        args.km,
        service_date=args.date,
        cost=args.cost,
        location=args.location,
        notes=args.notes,
    )

    print(f"Scheduled {entry.name} for {vehicle.name}:")
    print(f"  Km:     {entry.mileage:,.0f}")
    print(f"  Date:   {entry.date}")
    print(f"  Status: {entry.status}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_vehicle(args.vehicle_file, vehicle)
    print("Schedule saved.")

    return 0


# =============================================================================
# Update km command
# =============================================================================


def cmd_update_km(args):
    """Update the odometer and recompute every maintenance item."""
    vehicle = load_vehicle(args.vehicle_file)
    old_km = vehicle.current_km

    print(f"Vehicle: {vehicle.name}")
    print(f"Current km: {old_km:,.0f}")
    print(f"New km:     {args.km:,.0f}")
    print()

    added = vehicle.update_mileage(args.km)

    for notification in added:
        print(f"ALERT: {notification.title}")
    if added:
        print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_vehicle(args.vehicle_file, vehicle)
    print("Odometer updated.")

    return 0


# =============================================================================
# Notifications command
# =============================================================================


def make_notification_table(notifications: List[Notification]) -> List[List[str]]:
    """Convert notifications to table rows."""
    return [
        [
            n.created_at.strftime("%Y-%m-%d %H:%M"),
            n.priority.label,
            n.title,
            truncate(n.message, 60),
        ]
        for n in notifications
    ]


def cmd_notifications(args):
    """List alerts, highest priority first."""
    vehicle = load_vehicle(args.vehicle_file)
    settings = Settings.from_env()

    notifications = prune_notifications(
        vehicle.notifications, settings.notification_max_age_days
    )
    if args.high_only:
        notifications = [n for n in notifications if n.requires_immediate_action]

    print(f"Vehicle: {vehicle.name}")
    print(f"Notifications: {len(notifications)}")
    print()

    if not notifications:
        print("No notifications.")
        return 0

    headers = ["Created", "Priority", "Title", "Message"]
    print(
        tabulate(
            make_notification_table(sort_notifications(notifications)),
            headers=headers,
            tablefmt="simple",
        )
    )

    return 0


# =============================================================================
# Types command
# =============================================================================


def cmd_types(args):
    """List maintenance items tracked for this vehicle and their intervals."""
    vehicle = load_vehicle(args.vehicle_file)

    rows = [
        [
            state.name,
            type_key(state.maintenance_type),
            frequency_text(state.maintenance_type),
        ]
        for state in vehicle.states
    ]
    print(f"Vehicle: {vehicle.name} ({vehicle.vehicle_type})")
    print()
    print(tabulate(rows, headers=["Item", "Key", "Interval"], tablefmt="simple"))

    return 0


# =============================================================================
# Register command
# =============================================================================


def cmd_register(args):
    """Create a vehicle file with fresh maintenance states."""
    if args.vehicle_file.exists():
        print(f"Error: File already exists: {args.vehicle_file}")
        return 1

    vehicle = register_vehicle(args.make, args.model, args.year, args.type, args.km)

    print(f"Registering {vehicle.name} ({vehicle.vehicle_type}) at {vehicle.current_km:,.0f} km")
    for state in vehicle.states:
        print(f"  {state.name:<24} due at {state.due_at_km:,.0f} km")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_vehicle(args.vehicle_file, vehicle)
    print("Vehicle saved.")

    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles/corolla.yaml register Toyota Corolla 2019 --km 42000
  %(prog)s vehicles/corolla.yaml status
  %(prog)s vehicles/corolla.yaml status --critical-only
  %(prog)s vehicles/corolla.yaml update-km 46500
  %(prog)s vehicles/corolla.yaml log oil --km 46800 --cost 45 --location "Quick Lube"
  %(prog)s vehicles/corolla.yaml schedule brakes 50000 --date 2025-09-01
  %(prog)s vehicles/corolla.yaml history --type oil
  %(prog)s vehicles/corolla.yaml notifications
""",
    )
    parser.add_argument(
        "vehicle_file",
        type=Path,
        help="Path to vehicle YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Register subcommand
    register_parser = subparsers.add_parser(
        "register", help="Create a vehicle file with fresh maintenance states"
    )
    register_parser.add_argument("make", type=str, help="Vehicle make (e.g., 'Toyota')")
    register_parser.add_argument("model", type=str, help="Vehicle model (e.g., 'Corolla')")
    register_parser.add_argument("year", type=int, help="Model year")
    register_parser.add_argument(
        "--type",
        choices=["car", "motorcycle"],
        default="car",
        help="Vehicle type (default: car)",
    )
    register_parser.add_argument(
        "--km", type=float, default=0, help="Current odometer reading (default: 0)"
    )
    register_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be created without saving"
    )

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show the health of every maintenance item"
    )
    status_parser.add_argument(
        "--critical-only",
        action="store_true",
        help="Only show items in the critical tier",
    )

    # History subcommand
    history_parser = subparsers.add_parser("history", help="View service history")
    history_parser.add_argument(
        "--type",
        type=str,
        help="Filter to maintenance types containing text (case-insensitive)",
    )
    history_parser.add_argument(
        "--since",
        type=str,
        help="Show only entries since date (YYYY-MM-DD)",
    )
    history_parser.add_argument(
        "--status",
        choices=ENTRY_STATUSES,
        help="Show only entries with this status",
    )
    history_parser.add_argument(
        "--sort",
        choices=["date", "km", "type"],
        default="date",
        help="Sort order (default: date)",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Record a completed service")
    log_parser.add_argument(
        "maintenance_type", type=str, help="Maintenance type (e.g., 'oil', 'airFilter')"
    )
    log_parser.add_argument(
        "--km", type=float, help="Odometer at time of service (default: current)"
    )
    log_parser.add_argument(
        "--date", type=str, help="Service date in YYYY-MM-DD format (default: today)"
    )
    log_parser.add_argument("--cost", type=float, help="Cost of service")
    log_parser.add_argument("--location", type=str, help="Where the service was done")
    log_parser.add_argument("--notes", type=str, help="Notes about the service")
    log_parser.add_argument(
        "--keep-km",
        action="store_true",
        help="Do not move the vehicle odometer forward to the service km",
    )
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    # Schedule subcommand
    schedule_parser = subparsers.add_parser("schedule", help="Schedule a future service")
    schedule_parser.add_argument("maintenance_type", type=str, help="Maintenance type")
    schedule_parser.add_argument("km", type=float, help="Odometer value to service at")
    schedule_parser.add_argument(
        "--date", type=str, help="Planned date in YYYY-MM-DD format (default: +30 days)"
    )
    schedule_parser.add_argument("--cost", type=float, help="Estimated cost")
    schedule_parser.add_argument("--location", type=str, help="Planned location")
    schedule_parser.add_argument("--notes", type=str, help="Notes")
    schedule_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    # Update km subcommand
    update_km_parser = subparsers.add_parser(
        "update-km", help="Update the odometer and recompute every item"
    )
    update_km_parser.add_argument("km", type=float, help="Current odometer reading")
    update_km_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Notifications subcommand
    notifications_parser = subparsers.add_parser(
        "notifications", help="List alerts for the vehicle"
    )
    notifications_parser.add_argument(
        "--high-only",
        action="store_true",
        help="Only show alerts that require immediate action",
    )

    # Types subcommand
    subparsers.add_parser("types", help="List maintenance items and their intervals")

    return parser


COMMANDS = {
    "register": cmd_register,
    "status": cmd_status,
    "history": cmd_history,
    "log": cmd_log,
    "schedule": cmd_schedule,
    "update-km": cmd_update_km,
    "notifications": cmd_notifications,
    "types": cmd_types,
}


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    # Validate vehicle file exists
    if args.command != "register" and not args.vehicle_file.exists():
        print(f"Error: File not found: {args.vehicle_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except ValueError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(e if str(e).startswith("Error") else f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
