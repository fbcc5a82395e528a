import logging
import random
import threading
import time
from typing import Optional

from .base import GazeCallback, GazeStream
from .. import geometry
from ..models.gaze import DisplayArea, EyeData, GazeSample, NormalizedPoint2D

logger = logging.getLogger(__name__)

# Half the interpupillary distance, in mm.
_HALF_IPD_MM = 32.0


class DummyGazeStream(GazeStream):
    """
    A GazeStream that simulates a tracker for development and testing.

    While it has subscribers, a background thread emits samples at the
    configured frequency. The simulated user sits `distance_mm` in front of
    the display center and looks at the point set with `look_at`, with
    gaussian noise on the gaze point. `publish` delivers a sample directly,
    which lets tests drive the stream without the thread.
    """

    def __init__(
        self,
        display_area: DisplayArea,
        frequency: int = 120,
        distance_mm: float = 600.0,
        noise_mm: float = 2.0,
        invalid_rate: float = 0.0,
        seed: Optional[int] = None,
        autostart: bool = True,
    ):
        """
        Args:
            display_area: The geometry reported by `get_display_area`.
            frequency: The frequency in Hz to emit gaze data.
            distance_mm: Distance of the simulated eyes from the display.
            noise_mm: Standard deviation of the gaze point noise on the display.
            invalid_rate: Probability that an emitted sample is marked invalid.
            seed: Seed for the noise generator.
            autostart: Emit samples from a background thread while subscribed.
        """
        if frequency <= 0:
            raise ValueError("Frequency must be positive.")
        if not 0.0 <= invalid_rate <= 1.0:
            raise ValueError("Invalid rate must be between 0 and 1.")

        self._display_area = display_area
        self._interval_s = 1.0 / frequency
        self._distance_mm = distance_mm
        self._noise_mm = noise_mm
        self._invalid_rate = invalid_rate
        self._random = random.Random(seed)
        self._autostart = autostart

        self._subscribers: list[GazeCallback] = []
        self._subscribers_lock = threading.Lock()
        self._target = NormalizedPoint2D(0.5, 0.5)
        # Each worker thread owns its stop event; both are swapped under the lock.
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def name(self) -> str:
        return "DUM8-7RACKER"

    def look_at(self, x: float, y: float) -> None:
        """Moves the simulated gaze to a normalized display coordinate."""
        self._target = NormalizedPoint2D(x, y)

    def get_display_area(self) -> DisplayArea:
        return self._display_area

    def subscribe(self, callback: GazeCallback) -> None:
        with self._subscribers_lock:
            self._subscribers.append(callback)
            if self._autostart and self._thread is None:
                self._start_locked()

    def unsubscribe(self, callback: GazeCallback) -> None:
        with self._subscribers_lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
            if self._subscribers or self._thread is None:
                return
            thread, self._thread = self._thread, None
            stop_event, self._stop_event = self._stop_event, None
            stop_event.set()

        # The worker takes the lock in `publish`, so it is joined outside it.
        if thread is not threading.current_thread():
            thread.join()
        logger.info("Dummy gaze stream stopped.")

    def publish(self, sample: GazeSample) -> None:
        """Delivers `sample` to every current subscriber on the calling thread."""
        with self._subscribers_lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(sample)
            except Exception:
                logger.exception("Error in gaze data subscriber.")

    def generate_sample(self) -> GazeSample:
        """Creates one simulated sample looking at the current target."""
        area = self._display_area
        target = geometry.to_point3d(self._target, area)
        center = geometry.to_point3d(NormalizedPoint2D(0.5, 0.5), area)
        right = geometry.normalized_direction(area.top_left, area.top_right)
        down = geometry.normalized_direction(area.top_left, area.bottom_left)
        toward_user = geometry.normalize(geometry.cross(down, right))

        valid = self._random.random() >= self._invalid_rate
        now_us = time.monotonic_ns() // 1000

        eyes = []
        for side in (-1.0, 1.0):
            origin = geometry.add(
                geometry.add(center, geometry.mul(right, side * _HALF_IPD_MM)),
                geometry.mul(toward_user, self._distance_mm),
            )
            gaze_point = geometry.add(target, geometry.add(
                geometry.mul(right, self._random.gauss(0.0, self._noise_mm)),
                geometry.mul(down, self._random.gauss(0.0, self._noise_mm)),
            ))
            eyes.append(EyeData(
                gaze_point=gaze_point,
                gaze_point_validity=valid,
                gaze_origin=origin,
                gaze_origin_validity=valid,
                gaze_point_on_display_area=(self._target.x, self._target.y),
            ))

        return GazeSample(
            device_time_stamp=now_us,
            system_time_stamp=now_us,
            left_eye=eyes[0],
            right_eye=eyes[1],
        )

    def _start_locked(self) -> None:
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="DummyGazeStreamThread", daemon=True
        )
        self._thread.start()
        logger.info(f"Dummy gaze stream started at {1.0 / self._interval_s:.0f} Hz.")

    def _run(self, stop_event: threading.Event) -> None:
        start_time = time.monotonic()
        frame_counter = 0

        while not stop_event.is_set():
            self.publish(self.generate_sample())
            frame_counter += 1

            # Sleep until the next frame's target time
            target_time = start_time + frame_counter * self._interval_s
            stop_event.wait(max(0.0, target_time - time.monotonic()))
