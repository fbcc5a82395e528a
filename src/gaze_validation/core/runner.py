import asyncio
import logging
from typing import Iterable

from .protocols import ValidationView
from ..models.gaze import NormalizedPoint2D
from ..models.result import CalibrationValidationResult
from ..validation import ScreenBasedCalibrationValidation, ValidationState

logger = logging.getLogger(__name__)


class ValidationRunner:
    """
    Walks a validation object through a list of target points.

    Orchestrates the sequence UI -> tracker -> UI for every point and computes
    the result at the end. Engine calls that touch the tracker run off the
    event loop.
    """
    def __init__(
        self,
        validation: ScreenBasedCalibrationValidation,
        view: ValidationView,
        settle_s: float = 0.5,
        poll_interval_s: float = 0.05,
    ):
        self.validation = validation
        self.view = view
        self._settle_s = settle_s
        self._poll_interval_s = poll_interval_s

    async def run(self, points: Iterable[tuple[float, float]]) -> CalibrationValidationResult:
        points = [NormalizedPoint2D.of(p) for p in points]

        await self.view.open()
        await self.view.show_message("Preparing validation...")

        # 1. Enter Mode
        await asyncio.to_thread(self.validation.enter_validation_mode)
        try:
            # 2. Collect Points
            for point in points:
                await self.view.show_point(point.x, point.y)
                # Stabilization Wait
                await asyncio.sleep(self._settle_s)
                await self._collect(point)

            # 3. Compute
            await self.view.show_message("Computing result...")
            result = await asyncio.to_thread(self.validation.compute)
            logger.info(f"Validation finished:\n{result}")

            await self.view.show_results(result)
            return result

        finally:
            # 4. Leave Mode
            await asyncio.to_thread(self.validation.leave_validation_mode)
            await self.view.close()

    async def _collect(self, point: NormalizedPoint2D) -> None:
        self.validation.start_collecting_data(point)
        while self.validation.state is ValidationState.COLLECTING_DATA:
            await asyncio.sleep(self._poll_interval_s)
        logger.debug(f"Collection for ({point.x}, {point.y}) finished.")
