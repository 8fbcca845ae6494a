class SchedulingError(Exception):
    """Base for every terminal failure of a scheduling operation."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SchedulingError):
    """Referenced store, service, appointment or user does not exist."""

    status_code = 404


class BadRequestError(SchedulingError):
    """Input violates a booking rule (past date, outside working hours, ...)."""

    status_code = 400


class ForbiddenError(SchedulingError):
    """Caller may not act on this appointment or store."""

    status_code = 403


class ConflictError(SchedulingError):
    """Requested interval overlaps an active appointment of the same store."""

    status_code = 409


class SlotAlreadyBookedError(RuntimeError):
    """Raised by appointment stores when (store_id, start_time) is already held by an active row."""
    pass
