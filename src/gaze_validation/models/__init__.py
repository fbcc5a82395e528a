from .gaze import DisplayArea, EyeData, GazeSample, NormalizedPoint2D, Point3D
from .result import CalibrationValidationPoint, CalibrationValidationResult, OutputMode
