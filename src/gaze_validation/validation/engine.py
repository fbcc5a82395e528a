import logging
import threading
import time
from typing import Callable, Optional

from . import metrics
from .buffer import SampleBuffer, TimeKeeper
from .state import ValidationState
from ..errors import InvalidArgumentError, InvalidStateError, NotFoundError
from ..models.gaze import GazeSample, NormalizedPoint2D
from ..models.result import CalibrationValidationResult, OutputMode
from ..trackers.base import GazeStream
from ..utils.logging import ThrottledLogger

logger = logging.getLogger(__name__)

MIN_SAMPLE_COUNT, MAX_SAMPLE_COUNT = 10, 3000
MIN_TIMEOUT_MS, MAX_TIMEOUT_MS = 100, 3000


class ScreenBasedCalibrationValidation:
    """
    Calibration validation for screen based eye trackers.

    Typical use:

        with ScreenBasedCalibrationValidation(stream) as validation:
            validation.enter_validation_mode()
            for point in points:
                validation.start_collecting_data(point)
                while validation.state is ValidationState.COLLECTING_DATA:
                    time.sleep(0.05)
            result = validation.compute()

    Gaze samples arrive on the stream's own thread. Everything that thread
    shares with callers (state, open buffer, current target and the collected
    session) is guarded by a single lock. Entering and leaving also hold a
    second lock for the whole transition, subscription included, so the
    stream never ends up with a stale or missing callback. Collection for a
    point ends when the sample count is reached or the timeout elapses,
    whichever comes first; the timeout is detected both when a sample
    arrives and when `state` is read, so a stalled stream cannot block a
    caller forever.
    """

    def __init__(
        self,
        stream: GazeStream,
        sample_count: int = 30,
        timeout_ms: int = 1000,
        output_mode: OutputMode = OutputMode.SPLIT,
        clock: Callable[[], float] = time.monotonic,
    ):
        if stream is None:
            raise InvalidArgumentError("Gaze stream is None.")
        if not MIN_SAMPLE_COUNT <= sample_count <= MAX_SAMPLE_COUNT:
            raise InvalidArgumentError(
                f"Sample count must be between {MIN_SAMPLE_COUNT} and {MAX_SAMPLE_COUNT}, got {sample_count}."
            )
        if not MIN_TIMEOUT_MS <= timeout_ms <= MAX_TIMEOUT_MS:
            raise InvalidArgumentError(
                f"Timeout must be between {MIN_TIMEOUT_MS} and {MAX_TIMEOUT_MS} ms, got {timeout_ms}."
            )

        self._stream = stream
        self._sample_count = sample_count
        self._output_mode = OutputMode(output_mode)
        self._time_keeper = TimeKeeper(timeout_ms, clock)
        # Serializes enter/leave including the stream (un)subscribe calls.
        # Always taken before _lock, never from the sample callback.
        self._mode_lock = threading.Lock()
        self._lock = threading.Lock()

        self._state = ValidationState.NOT_IN_VALIDATION_MODE
        self._session: Optional[list[tuple[NormalizedPoint2D, SampleBuffer]]] = None
        self._buffer: Optional[SampleBuffer] = None
        self._current_point: Optional[NormalizedPoint2D] = None
        self._latest_result = CalibrationValidationResult.unset(self._output_mode)
        self._dropped = ThrottledLogger(logger)

    def __enter__(self) -> "ScreenBasedCalibrationValidation":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- Properties ---

    @property
    def sample_count(self) -> int:
        return self._sample_count

    @property
    def output_mode(self) -> OutputMode:
        return self._output_mode

    @property
    def state(self) -> ValidationState:
        with self._lock:
            if self._state is ValidationState.COLLECTING_DATA and self._time_keeper.timed_out:
                # No sample may arrive to notice the timeout, so check it here too.
                self._seal_locked()
            return self._state

    @property
    def is_collecting(self) -> bool:
        return self.state is ValidationState.COLLECTING_DATA

    @property
    def result(self) -> CalibrationValidationResult:
        """The latest computed result. Only meaningful after `compute()`."""
        return self._latest_result

    @property
    def collected_points(self) -> tuple[NormalizedPoint2D, ...]:
        with self._lock:
            return tuple(point for point, _ in self._session or ())

    # --- Actions ---

    def enter_validation_mode(self) -> None:
        """Starts a new, empty session and subscribes to gaze data."""
        with self._mode_lock:
            with self._lock:
                if self._state is not ValidationState.NOT_IN_VALIDATION_MODE:
                    raise InvalidStateError("Validation mode already entered.")

                self._session = []
                self._latest_result = CalibrationValidationResult.unset(self._output_mode)
                self._state = ValidationState.NOT_COLLECTING_DATA

            self._stream.subscribe(self._on_gaze_data)
        logger.info(f"Entered validation mode on {self._stream.name}.")

    def leave_validation_mode(self) -> None:
        """Unsubscribes from gaze data and discards everything collected."""
        with self._mode_lock:
            with self._lock:
                if self._state is ValidationState.NOT_IN_VALIDATION_MODE:
                    raise InvalidStateError("Not in validation mode.")

                self._state = ValidationState.NOT_IN_VALIDATION_MODE
                self._session = None
                self._buffer = None
                self._current_point = None
                self._time_keeper.stop()

            self._stream.unsubscribe(self._on_gaze_data)
        logger.info("Left validation mode.")

    def start_collecting_data(self, point: NormalizedPoint2D | tuple[float, float]) -> None:
        """
        Starts collecting data for the point the user is assumed to look at,
        given in the Active Display Coordinate System. Poll `state` to know
        when collection is finished.
        """
        point = NormalizedPoint2D.of(point)
        with self._lock:
            if self._state is ValidationState.COLLECTING_DATA:
                raise InvalidStateError("Already collecting data.")
            if self._state is ValidationState.NOT_IN_VALIDATION_MODE:
                raise InvalidStateError("Not in validation mode.")

            self._current_point = point
            self._buffer = SampleBuffer(point, self._sample_count)
            self._time_keeper.restart()
            self._state = ValidationState.COLLECTING_DATA

        logger.debug(f"Collecting data for ({point.x}, {point.y}).")

    def discard_data(self, point: NormalizedPoint2D | tuple[float, float]) -> None:
        """Removes all collected data for `point`."""
        point = NormalizedPoint2D.of(point)
        with self._lock:
            if self._state is ValidationState.NOT_IN_VALIDATION_MODE:
                raise InvalidStateError("Not in validation mode. No points to discard.")

            kept = [(p, buffer) for p, buffer in self._session if p != point]
            if len(kept) == len(self._session):
                raise NotFoundError(f"Attempt to discard non-collected point ({point.x}, {point.y}).")

            logger.debug(f"Discarded {len(self._session) - len(kept)} entries for ({point.x}, {point.y}).")
            self._session = kept

    def compute(self) -> CalibrationValidationResult:
        """
        Computes accuracy and precision for all collected points and stores
        the result in `result`.

        Points that timed out carry NaN metrics; if every point timed out, the
        averages are NaN as well. The gaze data is left untouched.
        """
        with self._lock:
            if self._state is ValidationState.COLLECTING_DATA and self._time_keeper.timed_out:
                self._seal_locked()
            if self._state is ValidationState.COLLECTING_DATA:
                raise InvalidStateError("Compute called while collecting data.")
            if self._state is ValidationState.NOT_IN_VALIDATION_MODE:
                raise InvalidStateError("Not in validation mode. Nothing to compute.")
            # Sealed buffers never change, so a shallow copy is a stable snapshot.
            snapshot = [(point, buffer.samples) for point, buffer in self._session]

        display_area = self._stream.get_display_area()
        self._latest_result = metrics.compute(
            snapshot, self._sample_count, display_area, self._output_mode
        )
        logger.info(f"Computed validation result for {len(snapshot)} points.")
        return self._latest_result

    def close(self) -> None:
        """Leaves validation mode if it was entered."""
        if self.state is not ValidationState.NOT_IN_VALIDATION_MODE:
            self.leave_validation_mode()

    # --- Internals ---

    def _on_gaze_data(self, sample: GazeSample) -> None:
        """Called by the gaze stream, on its own thread, for every sample."""
        with self._lock:
            if self._state is not ValidationState.COLLECTING_DATA:
                return

            if self._time_keeper.timed_out:
                self._seal_locked()
                return

            if not sample.is_valid:
                # Only samples with a valid gaze point for both eyes count.
                self._dropped.debug("Dropped gaze sample with invalid gaze point.")
                return

            if self._buffer.append(sample):
                self._seal_locked()

    def _seal_locked(self) -> None:
        """
        Moves the open buffer into the session and stops collecting.

        Must be called with the lock held. Both the sample callback and the
        `state` poll end up here; whichever comes second finds the state
        already changed and does nothing.
        """
        if self._state is not ValidationState.COLLECTING_DATA:
            return

        buffer = self._buffer.seal()
        self._session.append((self._current_point, buffer))
        if len(buffer) < self._sample_count:
            logger.warning(
                f"Timed out collecting ({buffer.target.x}, {buffer.target.y}) "
                f"with {len(buffer)}/{self._sample_count} samples."
            )

        self._buffer = None
        self._current_point = None
        self._time_keeper.stop()
        self._state = ValidationState.NOT_COLLECTING_DATA
