class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed or out of range."""


class ConflictError(DomainError):
    """Raised when an operation collides with existing state."""


class InvalidReferenceError(DomainError):
    """Raised when a referenced worker, template, creator or schedule is unknown or mismatched."""


class CapacityError(DomainError):
    """Raised when the roster cannot cover the requested headcount."""


class OutOfRangeError(DomainError):
    """Raised when a location falls outside the geofence."""

    def __init__(self, distance_meters: float, radius_meters: float):
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters
        super().__init__(
            f"Location is {round(distance_meters)}m from residence center. "
            f"Must be within {radius_meters:g}m radius."
        )
