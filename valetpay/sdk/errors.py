"""Exception types shared across the SDK."""


class ValetPayError(Exception):
    """Base class for errors raised by the valet-pay SDK."""
    pass


class RateResolutionError(ValetPayError):
    """Raised when no rate table can be resolved for a location.

    This is a configuration error. Callers must not fall back to zero
    rates, which would understate commission and tips.
    """

    def __init__(self, location_id, reason: str = ""):
        self.location_id = location_id
        message = f"No rate table for location {location_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RecordNotFoundError(ValetPayError):
    """Raised when a record ID does not exist in the store."""
    pass
