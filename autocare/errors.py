"""Exception types raised by the maintenance engine and its collaborators."""


class InvalidIntervalError(ValueError):
    """Raised when a maintenance interval is zero or negative."""

    def __init__(self, interval) -> None:
        self.interval = interval
        self.message = f"Error: maintenance interval must be positive (got {interval})"
        super().__init__(self.message)


class OutOfRangePercentageError(AssertionError):
    """Raised when a clamped percentage still falls outside 0..100."""

    def __init__(self, percentage) -> None:
        self.percentage = percentage
        self.message = f"Error: percentage {percentage} outside 0..100"
        super().__init__(self.message)


class ValidationError(ValueError):
    """Raised when vehicle, odometer or scheduling input is rejected."""

    def __init__(self, message: str = "Error: invalid input") -> None:
        self.message = message
        super().__init__(self.message)


class VehicleNotFoundError(LookupError):
    """Raised when a vehicle ID has no file in the garage."""

    def __init__(self, vehicle_id: str) -> None:
        self.vehicle_id = vehicle_id
        self.message = f"Error: vehicle '{vehicle_id}' not found"
        super().__init__(self.message)
