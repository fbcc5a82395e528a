from .buffer import SampleBuffer, TimeKeeper
from .engine import ScreenBasedCalibrationValidation
from .state import ValidationState
