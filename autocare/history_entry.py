"""HistoryEntry class for maintenance records."""
from datetime import date
from typing import Optional

from .maintenance_type import TypeLike, display_name, type_key

COMPLETED = "completed"
PENDING = "pending"
URGENT = "urgent"

ENTRY_STATUSES = (COMPLETED, PENDING, URGENT)

# Completed within this many days of the scheduled date counts as on time
ON_TIME_WINDOW_DAYS = 7


class HistoryEntry:
    """A record of maintenance performed or scheduled."""

    def __init__(
            self,
            maintenance_type: TypeLike,
            date: str,
            mileage: float,
            status: str = COMPLETED,
            cost: Optional[float] = None,
            location: Optional[str] = None,
            notes: Optional[str] = None,
            scheduled_date: Optional[str] = None,
    ):
        self.maintenance_type = maintenance_type
        self.date = date
        self.mileage = mileage
        self.status = status
        self.cost = cost
        self.location = location
        self.notes = notes
        self.scheduled_date = scheduled_date

    @property
    def type_key(self) -> str:
        return type_key(self.maintenance_type)

    @property
    def name(self) -> str:
        return display_name(self.maintenance_type)

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def is_open(self) -> bool:
        """Scheduled but not yet done (pending or urgent)."""
        return self.status in (PENDING, URGENT)

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """Pending entry whose date has already passed."""
        today = today or date.today()
        return self.status == PENDING and date.fromisoformat(self.date) < today

    @property
    def was_completed_on_time(self) -> bool:
        if not self.is_completed or self.scheduled_date is None:
            return False
        done = date.fromisoformat(self.date)
        scheduled = date.fromisoformat(self.scheduled_date)
        return abs((done - scheduled).days) <= ON_TIME_WINDOW_DAYS
