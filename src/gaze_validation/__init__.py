"""Calibration validation for screen based eye trackers."""
from .errors import (
    CalibrationValidationError,
    DegenerateVectorError,
    InsufficientDataError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from .models import (
    CalibrationValidationPoint,
    CalibrationValidationResult,
    DisplayArea,
    GazeSample,
    NormalizedPoint2D,
    OutputMode,
    Point3D,
)
from .validation import ScreenBasedCalibrationValidation, ValidationState
