class NotFoundError(LookupError):
    """Raised when a booking, provider or service does not exist."""
    pass


class UnauthorizedError(PermissionError):
    """Raised when the caller is neither the booking's client, its provider, nor an admin."""
    pass


class StoreFailure(RuntimeError):
    """Raised when the underlying persistence layer is unavailable or errors."""
    pass


class ConditionFailed(RuntimeError):
    """Raised by a store when a conditional update's expected status no longer holds."""
    pass


class InvalidTransitionError(RuntimeError):
    """Raised when a status change is not allowed from the booking's current state."""

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class SlotUnavailableError(RuntimeError):
    """Raised when a requested start time is not an offered slot."""
    pass
