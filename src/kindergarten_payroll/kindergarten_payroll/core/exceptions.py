class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""


class InvalidCoordinate(ValidationError):
    """Raised when a latitude/longitude is out of range."""


class LocationNotAllowed(DomainError):
    """Raised when a clock event comes from outside the geofence."""


class NotFound(DomainError):
    """Raised when a referenced staff member, child or record does not exist."""


class StateConflict(DomainError):
    """Raised when a transition is invalid for the current state.

    Safe to retry: retrying yields the same error without changing state.
    """


class AlreadyClockedIn(StateConflict):
    pass


class AlreadyClockedOut(StateConflict):
    pass


class NotClockedIn(StateConflict):
    pass


class InvalidTransition(StateConflict):
    pass


class PeriodLocked(StateConflict):
    """Raised when attendance of an approved/paid payroll month is touched."""


class DuplicatePeriod(DomainError):
    """Raised when a second Payroll/ChildPayment would cover the same period."""
