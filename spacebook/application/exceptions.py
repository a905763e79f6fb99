class InvalidRequest(ValueError):
    """Raised when a booking request cannot be evaluated (bad duration, bounds or date)."""
    pass


class InvalidTimeFormat(InvalidRequest):
    """Raised when a start time is not a valid HH:MM string."""
    pass


class DataSourceError(RuntimeError):
    """Raised when the availability backend fails (network errors, bad payloads, 5xx)."""
    pass


class CheckTimeout(DataSourceError):
    """Raised when the availability backend does not answer before the check deadline."""
    pass
