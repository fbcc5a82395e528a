import math
from dataclasses import dataclass, field
from enum import Enum

from .gaze import GazeSample, NormalizedPoint2D

NAN = float("nan")


class OutputMode(str, Enum):
    """
    Shape in which accuracy and precision values are presented.

    SPLIT reports left and right eye separately. COMBINED reports a single
    value per metric, the mean of both eyes. Downstream consumers differ in
    which one they expect, so the choice is left to configuration.
    """
    SPLIT = "split"
    COMBINED = "combined"


def _combine(left: float, right: float) -> float:
    return (left + right) / 2.0


def _fmt(value: float) -> str:
    return "n/a" if math.isnan(value) else f"{value:.2f}"


@dataclass(slots=True, frozen=True)
class CalibrationValidationPoint:
    """
    Accuracy and precision for one collected target, in degrees.

    The raw samples the values were computed from are kept in `gaze_data`.
    Metrics are NaN when collection timed out before enough valid samples
    were received.
    """
    coordinates: NormalizedPoint2D
    accuracy_left_eye: float
    precision_left_eye: float
    precision_rms_left_eye: float
    accuracy_right_eye: float
    precision_right_eye: float
    precision_rms_right_eye: float
    timed_out: bool
    gaze_data: tuple[GazeSample, ...] = ()

    @classmethod
    def timed_out_point(cls, coordinates: NormalizedPoint2D, gaze_data) -> "CalibrationValidationPoint":
        return cls(coordinates, NAN, NAN, NAN, NAN, NAN, NAN, True, tuple(gaze_data))

    @property
    def accuracy(self) -> float:
        return _combine(self.accuracy_left_eye, self.accuracy_right_eye)

    @property
    def precision(self) -> float:
        return _combine(self.precision_left_eye, self.precision_right_eye)

    @property
    def precision_rms(self) -> float:
        return _combine(self.precision_rms_left_eye, self.precision_rms_right_eye)

    def to_dict(self, mode: OutputMode = OutputMode.SPLIT) -> dict:
        data = {
            "x": self.coordinates.x,
            "y": self.coordinates.y,
            "timed_out": self.timed_out,
            "sample_count": len(self.gaze_data),
        }
        if mode is OutputMode.COMBINED:
            data.update(
                accuracy=self.accuracy,
                precision=self.precision,
                precision_rms=self.precision_rms,
            )
        else:
            data.update(
                accuracy_left_eye=self.accuracy_left_eye,
                accuracy_right_eye=self.accuracy_right_eye,
                precision_left_eye=self.precision_left_eye,
                precision_right_eye=self.precision_right_eye,
                precision_rms_left_eye=self.precision_rms_left_eye,
                precision_rms_right_eye=self.precision_rms_right_eye,
            )
        return data


@dataclass(slots=True, frozen=True)
class CalibrationValidationResult:
    """
    Snapshot of the latest computation.

    Averages only include points that did not time out. They are NaN when
    there is no such point, which is also the state right after entering
    validation mode (see `unset`).
    """
    points: tuple[CalibrationValidationPoint, ...] = ()
    average_accuracy_left_eye: float = NAN
    average_precision_left_eye: float = NAN
    average_precision_rms_left_eye: float = NAN
    average_accuracy_right_eye: float = NAN
    average_precision_right_eye: float = NAN
    average_precision_rms_right_eye: float = NAN
    mode: OutputMode = field(default=OutputMode.SPLIT, compare=False)

    @classmethod
    def unset(cls, mode: OutputMode = OutputMode.SPLIT) -> "CalibrationValidationResult":
        return cls(mode=mode)

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.average_accuracy_left_eye)

    @property
    def average_accuracy(self) -> float:
        return _combine(self.average_accuracy_left_eye, self.average_accuracy_right_eye)

    @property
    def average_precision(self) -> float:
        return _combine(self.average_precision_left_eye, self.average_precision_right_eye)

    @property
    def average_precision_rms(self) -> float:
        return _combine(self.average_precision_rms_left_eye, self.average_precision_rms_right_eye)

    def to_dict(self, mode: OutputMode | None = None) -> dict:
        mode = OutputMode(mode or self.mode)
        data = {"mode": mode.value, "points": [p.to_dict(mode) for p in self.points]}
        if mode is OutputMode.COMBINED:
            data.update(
                average_accuracy=self.average_accuracy,
                average_precision=self.average_precision,
                average_precision_rms=self.average_precision_rms,
            )
        else:
            data.update(
                average_accuracy_left_eye=self.average_accuracy_left_eye,
                average_accuracy_right_eye=self.average_accuracy_right_eye,
                average_precision_left_eye=self.average_precision_left_eye,
                average_precision_right_eye=self.average_precision_right_eye,
                average_precision_rms_left_eye=self.average_precision_rms_left_eye,
                average_precision_rms_right_eye=self.average_precision_rms_right_eye,
            )
        return data

    def __str__(self) -> str:
        lines = []
        for p in self.points:
            head = f"Point ({p.coordinates.x:.2f}, {p.coordinates.y:.2f})"
            if p.timed_out:
                lines.append(f"{head}: timed out ({len(p.gaze_data)} samples)")
            elif self.mode is OutputMode.COMBINED:
                lines.append(
                    f"{head}: accuracy {_fmt(p.accuracy)}, precision {_fmt(p.precision)}, "
                    f"precision RMS {_fmt(p.precision_rms)}"
                )
            else:
                lines.append(
                    f"{head}: accuracy L {_fmt(p.accuracy_left_eye)} R {_fmt(p.accuracy_right_eye)}, "
                    f"precision L {_fmt(p.precision_left_eye)} R {_fmt(p.precision_right_eye)}, "
                    f"precision RMS L {_fmt(p.precision_rms_left_eye)} R {_fmt(p.precision_rms_right_eye)}"
                )

        if self.mode is OutputMode.COMBINED:
            lines.append(
                f"Average: accuracy {_fmt(self.average_accuracy)}, "
                f"precision {_fmt(self.average_precision)}, "
                f"precision RMS {_fmt(self.average_precision_rms)}"
            )
        else:
            lines.append(
                f"Average: accuracy L {_fmt(self.average_accuracy_left_eye)} "
                f"R {_fmt(self.average_accuracy_right_eye)}, "
                f"precision L {_fmt(self.average_precision_left_eye)} "
                f"R {_fmt(self.average_precision_right_eye)}, "
                f"precision RMS L {_fmt(self.average_precision_rms_left_eye)} "
                f"R {_fmt(self.average_precision_rms_right_eye)}"
            )
        return "\n".join(lines)
