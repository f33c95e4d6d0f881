"""Status tiers and notification priorities."""

from enum import Enum


class Status(Enum):
    """Maintenance health tiers. Lower value = more urgent."""

    CRITICAL = 1
    UPCOMING = 2
    GOOD = 3
    EXCELLENT = 4


class Priority(Enum):
    """Notification priority. Lower value = shown first."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "Priority":
        return cls[label.upper()]
