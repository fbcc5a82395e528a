import time
import logging


class ThrottledLogger:
    """
    Emits at most one record per interval, prefixed with the number of
    occurrences since the last emitted record. Meant for per-sample paths.
    """
    def __init__(self, logger: logging.Logger, interval_sec: float = 5.0) -> None:
        self._logger = logger
        self._interval = interval_sec
        self._last_log_time = float("-inf")
        self._counter = 0

    def _log(self, level: int, message: str, *args) -> None:
        self._counter += 1
        now = time.monotonic()

        if now - self._last_log_time >= self._interval:
            self._logger.log(level, "[%d] " + message, self._counter, *args)
            self._last_log_time = now
            self._counter = 0

    def debug(self, message: str, *args) -> None:
        self._log(logging.DEBUG, message, *args)

    def warning(self, message: str, *args) -> None:
        self._log(logging.WARNING, message, *args)
