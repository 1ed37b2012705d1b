"""Exception taxonomy for quantity queries.

None of these derive from ValueError, so raising one inside a pydantic
validator surfaces the exception itself instead of a ValidationError.
"""

from typing import Optional


class PulseStatsException(Exception):
    """Base exception for quantity query errors."""

    def __init__(self, message: str, user_message: Optional[str] = None):
        """
        Initialize exception with technical and user-friendly messages.

        Args:
            message: Technical error message for logs
            user_message: Message safe to hand back to a remote caller
        """
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message


class InvalidParameterError(PulseStatsException):
    """Required field missing or malformed."""
    pass


class MissingTimeRangeError(InvalidParameterError):
    """Aggregation query built without both time bounds."""
    pass


class UnsupportedAggregationModeError(PulseStatsException):
    """Aggregation mode unknown or not applicable to the sample type."""
    pass


class IncompatibleUnitError(PulseStatsException):
    """No known conversion relates the two units."""

    def __init__(self, from_unit: str, to_unit: str, message: Optional[str] = None):
        super().__init__(
            message or f"Cannot convert '{from_unit}' to '{to_unit}'",
            user_message=f"Unit '{to_unit}' is not compatible with '{from_unit}'."
        )
        self.from_unit = from_unit
        self.to_unit = to_unit


class StoreExecutionError(PulseStatsException):
    """The health store reported a failure; the original error is kept as `cause`."""

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(
            f"{operation} failed in store: {cause}",
            user_message=str(cause) or type(cause).__name__
        )
        self.operation = operation
        self.cause = cause


class PreconditionError(PulseStatsException):
    """A programming contract was violated (not recoverable by retrying)."""
    pass
