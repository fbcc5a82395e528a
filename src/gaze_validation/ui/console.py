import logging
import sys
from typing import Callable, Optional, TextIO

from ..core.protocols import ValidationView
from ..models.result import CalibrationValidationResult

logger = logging.getLogger(__name__)


class ConsoleValidationView(ValidationView):
    """
    Minimal text view: announces targets and prints the result summary.

    Writes to `stream`, or to the current sys.stdout when none is given.
    `on_point` is called with every target as it is shown, e.g. to steer a
    simulated tracker towards it.
    """
    def __init__(
        self,
        stream: Optional[TextIO] = None,
        on_point: Optional[Callable[[float, float], None]] = None,
    ):
        self._stream = stream
        self._on_point = on_point

    async def open(self) -> None:
        logger.debug("Console view opened.")

    async def show_point(self, x: float, y: float) -> None:
        if self._on_point:
            self._on_point(x, y)
        self._write(f"Look at ({x:.2f}, {y:.2f})")

    async def show_message(self, text: str) -> None:
        self._write(text)

    async def show_results(self, result: CalibrationValidationResult) -> None:
        self._write(str(result))

    async def close(self) -> None:
        (self._stream or sys.stdout).flush()

    def _write(self, text: str) -> None:
        print(text, file=self._stream)
