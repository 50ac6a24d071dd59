
class SchedulingError(RuntimeError):
    """Base class for failures raised by the scheduling core."""
    pass


class InvalidInputError(SchedulingError):
    """Raised when a date, time or rating token is malformed."""
    pass


class BusinessRuleViolation(SchedulingError):
    """Raised when well-formed input breaks a scheduling rule."""
    pass


class OutsideBusinessHoursError(BusinessRuleViolation):
    pass


class PastDateTimeError(BusinessRuleViolation):
    pass


class BookingLimitReachedError(BusinessRuleViolation):
    pass


class SlotConflictError(BusinessRuleViolation):
    """Raised when (date, time) already holds an appointment."""
    pass


class AppointmentNotFoundError(BusinessRuleViolation):
    pass


class UnauthorizedActionError(SchedulingError):
    """Raised when a non-admin requester asks for an admin-only action."""
    pass


class RepositoryError(SchedulingError):
    """Raised when the appointment store fails (unavailable, timeouts, bad driver state)."""
    pass
