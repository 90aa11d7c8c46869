# personalization/errors.py


class TravelMateError(Exception):
    """Base class for every error raised by the personalization package."""


class ValidationError(TravelMateError):
    """Malformed input at the boundary (missing field, unknown enum value)."""


class LocationUnavailable(TravelMateError):
    """Geolocation denied, timed out or returned nothing usable."""


class QueueFlushFailure(TravelMateError):
    """A behavior batch could not be delivered and was put back on the queue."""

    def __init__(self, message, requeued=0):
        super().__init__(message)
        self.requeued = requeued


class NotFound(TravelMateError):
    """Lookup of a record id that does not exist."""
