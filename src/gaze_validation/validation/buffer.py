import time
from typing import Callable

from ..errors import InvalidStateError
from ..models.gaze import GazeSample, NormalizedPoint2D


class TimeKeeper:
    """
    Restartable timeout guard based on a monotonic clock.

    Never blocks: callers poll `timed_out`. The clock is injectable so tests
    can drive time explicitly.
    """
    __slots__ = ("_timeout_s", "_clock", "_started_at")

    def __init__(self, timeout_ms: int, clock: Callable[[], float] = time.monotonic):
        self._timeout_s = timeout_ms / 1000.0
        self._clock = clock
        self._started_at: float | None = None

    def restart(self) -> None:
        self._started_at = self._clock()

    def stop(self) -> None:
        self._started_at = None

    @property
    def elapsed_s(self) -> float:
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    @property
    def timed_out(self) -> bool:
        # A keeper that was never started has nothing to time out.
        return self._started_at is not None and self.elapsed_s >= self._timeout_s


class SampleBuffer:
    """
    Ordered, capped collection of valid gaze samples for one target point.

    The buffer is open while it accepts samples. `seal()` freezes the
    collected samples in place; a sealed buffer never changes again and only
    hands out copies.
    """
    __slots__ = ("target", "capacity", "_samples", "_sealed")

    def __init__(self, target: NormalizedPoint2D, capacity: int):
        self.target = target
        self.capacity = capacity
        self._samples: list[GazeSample] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    def __repr__(self) -> str:
        status = "sealed" if self._sealed else "open"
        return f"<SampleBuffer ({self.target.x}, {self.target.y}) {len(self)}/{self.capacity} {status}>"

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def is_full(self) -> bool:
        return len(self._samples) >= self.capacity

    @property
    def samples(self) -> tuple[GazeSample, ...]:
        return tuple(self._samples)

    def append(self, sample: GazeSample) -> bool:
        """
        Adds `sample` if there is room. Returns True when the buffer is full
        afterwards.
        """
        if self._sealed:
            raise InvalidStateError("Cannot append to a sealed sample buffer.")
        if not self.is_full:
            self._samples.append(sample)
        return self.is_full

    def seal(self) -> "SampleBuffer":
        self._sealed = True
        return self
