"""
Accuracy and precision of collected gaze data, in degrees of visual angle.

For every target the averaged gaze origin and gaze point of each eye are
compared against the target's position on the physical display:

* accuracy: angle between the averaged gaze direction and the direction
  from the averaged gaze origin to the target;
* precision (SD): angular standard deviation of each sample's gaze
  direction around the averaged gaze point;
* precision (RMS): root mean square of the angle between consecutive
  samples' gaze directions.
"""
import logging
import math
from typing import Callable, Iterable, Sequence

from .. import geometry
from ..errors import InsufficientDataError
from ..models.gaze import DisplayArea, EyeData, GazeSample, NormalizedPoint2D, Point3D
from ..models.result import CalibrationValidationPoint, CalibrationValidationResult, OutputMode

logger = logging.getLogger(__name__)

EyeSelector = Callable[[GazeSample], EyeData]


def left_eye(sample: GazeSample) -> EyeData:
    return sample.left_eye


def right_eye(sample: GazeSample) -> EyeData:
    return sample.right_eye


def accuracy(samples: Sequence[GazeSample], eye: EyeSelector, target: Point3D) -> float:
    gaze_point = geometry.average([eye(s).gaze_point for s in samples])
    gaze_origin = geometry.average([eye(s).gaze_origin for s in samples])

    direction_gaze_point = geometry.normalized_direction(gaze_origin, gaze_point)
    direction_target = geometry.normalized_direction(gaze_origin, target)
    return geometry.angle(direction_target, direction_gaze_point)


def precision_sd(samples: Sequence[GazeSample], eye: EyeSelector) -> float:
    gaze_point_average = geometry.average([eye(s).gaze_point for s in samples])

    squared = []
    for s in samples:
        origin = eye(s).gaze_origin
        own = geometry.normalized_direction(origin, eye(s).gaze_point)
        mean = geometry.normalized_direction(origin, gaze_point_average)
        squared.append(geometry.angle(own, mean) ** 2)

    variance = sum(squared) / len(squared)
    return math.sqrt(variance) if variance > 0 else 0.0


def precision_rms(samples: Sequence[GazeSample], eye: EyeSelector) -> float:
    """Sample-to-sample RMS precision. Needs at least two samples."""
    if len(samples) < 2:
        raise InsufficientDataError(
            f"RMS precision needs at least 2 samples, got {len(samples)}."
        )

    directions = [
        geometry.normalized_direction(eye(s).gaze_origin, eye(s).gaze_point)
        for s in samples
    ]
    squared = [geometry.angle(a, b) ** 2 for a, b in zip(directions, directions[1:])]
    return math.sqrt(sum(squared) / len(squared))


def compute_point(
    target: NormalizedPoint2D,
    samples: Sequence[GazeSample],
    sample_count: int,
    display_area: DisplayArea,
) -> CalibrationValidationPoint:
    if len(samples) < sample_count:
        # Timed out before enough valid samples arrived.
        return CalibrationValidationPoint.timed_out_point(target, samples)

    target_3d = geometry.to_point3d(target, display_area)

    return CalibrationValidationPoint(
        coordinates=target,
        accuracy_left_eye=accuracy(samples, left_eye, target_3d),
        precision_left_eye=precision_sd(samples, left_eye),
        precision_rms_left_eye=precision_rms(samples, left_eye),
        accuracy_right_eye=accuracy(samples, right_eye, target_3d),
        precision_right_eye=precision_sd(samples, right_eye),
        precision_rms_right_eye=precision_rms(samples, right_eye),
        timed_out=False,
        gaze_data=tuple(samples),
    )


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def compute(
    session: Iterable[tuple[NormalizedPoint2D, Sequence[GazeSample]]],
    sample_count: int,
    display_area: DisplayArea,
    mode: OutputMode = OutputMode.SPLIT,
) -> CalibrationValidationResult:
    """
    Computes a result for every (target, samples) pair in `session`, in order.

    A timed-out point never aborts the computation; it is reported with NaN
    metrics and left out of the averages.
    """
    points = tuple(
        compute_point(target, samples, sample_count, display_area)
        for target, samples in session
    )
    valid = [p for p in points if not p.timed_out]

    timed_out = len(points) - len(valid)
    if timed_out:
        logger.info(f"{timed_out} of {len(points)} points timed out and are excluded from the averages.")

    if not valid:
        return CalibrationValidationResult(points=points, mode=mode)

    return CalibrationValidationResult(
        points=points,
        average_accuracy_left_eye=_mean([p.accuracy_left_eye for p in valid]),
        average_precision_left_eye=_mean([p.precision_left_eye for p in valid]),
        average_precision_rms_left_eye=_mean([p.precision_rms_left_eye for p in valid]),
        average_accuracy_right_eye=_mean([p.accuracy_right_eye for p in valid]),
        average_precision_right_eye=_mean([p.precision_right_eye for p in valid]),
        average_precision_rms_right_eye=_mean([p.precision_rms_right_eye for p in valid]),
        mode=mode,
    )
