class RosterError(Exception):
    """Base class for failures surfaced to API callers."""

    code = "UNHANDLED"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RosterError):
    code = "VALIDATION"
    status_code = 400


class UniqueViolationError(RosterError):
    code = "UNIQUE_VIOLATION"
    status_code = 400


class NotFoundError(RosterError):
    code = "NOT_FOUND"
    status_code = 404


class UpstreamError(RosterError):
    """Blob storage or database could not be reached."""

    code = "UPSTREAM_FAILURE"
    status_code = 500
