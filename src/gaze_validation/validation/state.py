from enum import Enum, auto


class ValidationState(Enum):
    """
    States of a calibration validation session.

    NOT_IN_VALIDATION_MODE -> NOT_COLLECTING_DATA <-> COLLECTING_DATA
    """
    NOT_IN_VALIDATION_MODE = auto()  # enter_validation_mode() must be called first.
    NOT_COLLECTING_DATA = auto()  # Ready to collect data or compute a result.
    COLLECTING_DATA = auto()  # Ends when the sample count is reached or on timeout.
