class CalibrationValidationError(Exception):
    """Base class for every error raised by the validation engine."""


class InvalidArgumentError(CalibrationValidationError, ValueError):
    """A construction parameter is outside its accepted range."""


class InvalidStateError(CalibrationValidationError, RuntimeError):
    """An operation was attempted in the wrong validation state."""


class NotFoundError(CalibrationValidationError, LookupError):
    """No collected data exists for the requested point."""


class InsufficientDataError(CalibrationValidationError, ValueError):
    """Too few samples to compute the requested statistic."""


class DegenerateVectorError(CalibrationValidationError, ZeroDivisionError):
    """A zero-length vector cannot be normalized."""
