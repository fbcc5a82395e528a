import threading

import pytest

from gaze_validation.models import DisplayArea, EyeData, GazeSample, Point3D
from gaze_validation.trackers import GazeStream


class FakeClock:
    """Monotonic clock that only moves when told to."""
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGazeStream(GazeStream):
    """Gaze stream driven by the test through `publish`."""
    def __init__(self, display_area: DisplayArea):
        self.display_area = display_area
        self.subscribers = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "fake"

    def subscribe(self, callback) -> None:
        with self._lock:
            self.subscribers.append(callback)

    def unsubscribe(self, callback) -> None:
        with self._lock:
            self.subscribers.remove(callback)

    def get_display_area(self) -> DisplayArea:
        return self.display_area

    def publish(self, sample: GazeSample) -> None:
        with self._lock:
            subscribers = list(self.subscribers)
        for callback in subscribers:
            callback(sample)


def make_sample(
    gaze_point=(0.0, 0.0, 0.0),
    gaze_origin=(0.0, 0.0, -100.0),
    left_valid: bool = True,
    right_valid: bool = True,
    right_gaze_point=None,
    right_gaze_origin=None,
) -> GazeSample:
    def eye(point, origin, valid):
        return EyeData(
            gaze_point=Point3D.of(point),
            gaze_point_validity=valid,
            gaze_origin=Point3D.of(origin),
            gaze_origin_validity=valid,
        )

    return GazeSample(
        device_time_stamp=0,
        system_time_stamp=0,
        left_eye=eye(gaze_point, gaze_origin, left_valid),
        right_eye=eye(right_gaze_point or gaze_point, right_gaze_origin or gaze_origin, right_valid),
    )


@pytest.fixture
def display_area() -> DisplayArea:
    # The display center (0.5, 0.5) projects onto the origin.
    return DisplayArea.from_corners(
        top_left=(-300.0, 300.0, 0.0),
        top_right=(300.0, 300.0, 0.0),
        bottom_left=(-300.0, -300.0, 0.0),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stream(display_area) -> FakeGazeStream:
    return FakeGazeStream(display_area)
